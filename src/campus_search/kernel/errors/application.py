"""Application-layer errors – wiring and configuration problems."""

from __future__ import annotations

from campus_search.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """The service is misconfigured or misused by its host application."""

    default_code = "application_error"


__all__ = ["ApplicationError"]
