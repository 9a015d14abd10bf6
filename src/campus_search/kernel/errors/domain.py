"""Domain errors – malformed search or filter input."""

from __future__ import annotations

from typing import Any

from campus_search.kernel.errors.base import BaseError


class DomainError(BaseError):
    """A search rule was violated by the caller's input."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Query or filter parameters could not be interpreted.

    ``errors`` is a list of parameter-level failures, e.g.
    ``{"param": "costMin", "value": "abc", "reason": "not a number"}``.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


__all__ = ["DomainError", "ValidationError"]
