"""Root error class shared by search, cache, config and the data-source adapters."""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Every error the service raises on purpose derives from this.

    ``code`` is a stable slug the HTTP layer copies into error bodies;
    ``detail`` carries JSON-friendly context such as the offending query
    parameter or the upstream response body. When *cause* is given it is
    also chained as ``__cause__`` so tracebacks keep the original failure.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.detail: dict[str, Any] = dict(detail) if detail else {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict view used by log events and error responses."""
        data: dict[str, Any] = {"code": self.code, "message": self.message, "detail": self.detail}
        if self.cause is not None:
            data["cause"] = repr(self.cause)
        return data

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code!r})"


__all__ = ["BaseError"]
