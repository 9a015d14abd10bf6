"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   └── ValidationError
    ├── ApplicationError     (application.py)
    └── InfrastructureError  (infrastructure.py)
        ├── ConnectionError
        ├── TimeoutError
        └── ExternalServiceError

Only ``InfrastructureError`` raised by the data source ever reaches a
caller; cache, compression and metrics failures are recovered where they
happen.
"""

from campus_search.kernel.errors.application import ApplicationError
from campus_search.kernel.errors.base import BaseError
from campus_search.kernel.errors.domain import DomainError, ValidationError
from campus_search.kernel.errors.infrastructure import (
    ConnectionError,
    ExternalServiceError,
    InfrastructureError,
    TimeoutError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConnectionError",
    "DomainError",
    "ExternalServiceError",
    "InfrastructureError",
    "TimeoutError",
    "ValidationError",
]
