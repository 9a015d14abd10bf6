"""FastAPI adapter – SearchExceptionMapper."""
from __future__ import annotations

from typing import Any, Callable

from campus_search.adapters.fastapi.middleware import performance_of
from campus_search.observability.logging import get_logger

logger = get_logger(__name__)


def _require_fastapi() -> None:
    try:
        import fastapi  # noqa: F401
    except ImportError as exc:
        raise ImportError("Install 'fastapi' to use the FastAPI adapter") from exc


class SearchExceptionMapper:
    """Register kernel error -> HTTP response mappings on a FastAPI app.

    Error body schema::

        {"error": "Internal server error", "message": "...", "code": "..."}

    Mappings
    --------
    ``ValidationError``        -> 400
    ``RequestValidationError`` -> 400
    ``TimeoutError``           -> 504
    ``InfrastructureError``    -> 500

    For 5xx mappings the failure message is copied onto the request's
    performance record so the request is counted as an error.
    """

    def __init__(self) -> None:
        _require_fastapi()
        from fastapi.exceptions import RequestValidationError

        from campus_search.kernel.errors import InfrastructureError, TimeoutError, ValidationError

        # ORDER MATTERS: more-specific subtypes first
        self._map: list[tuple[type[Exception], int, str]] = [
            (ValidationError, 400, "Invalid request"),
            (RequestValidationError, 400, "Invalid request"),
            (TimeoutError, 504, "Gateway timeout"),
            (InfrastructureError, 500, "Internal server error"),
        ]

    def register(self, app: Any) -> None:
        """Register all error handlers on a ``FastAPI`` or ``Starlette`` app."""
        for exc_type, status, title in self._map:
            app.add_exception_handler(exc_type, self._make_handler(status, title))

    @staticmethod
    def _make_handler(status: int, title: str) -> Callable[[Any, Any], Any]:
        from fastapi.responses import JSONResponse

        from campus_search.kernel.errors import BaseError, ValidationError

        def handler(request: Any, exc: Any) -> Any:
            message = exc.message if isinstance(exc, BaseError) else str(exc)
            body: dict[str, Any] = {"error": title, "message": message}
            if isinstance(exc, BaseError):
                body["code"] = exc.code
            if isinstance(exc, ValidationError):
                body["errors"] = exc.errors
            elif status == 400 and hasattr(exc, "errors"):
                body["message"] = "Invalid query parameters"
                body["errors"] = [
                    {"param": ".".join(str(p) for p in e.get("loc", ())[1:]), "reason": e.get("msg")}
                    for e in exc.errors()
                ]

            if status >= 500:
                performance_of(request).error_message = body["message"]
                logger.error("request.error_mapped", status_code=status, error=body["message"], path=request.url.path)
            else:
                logger.info("request.rejected", status_code=status, error=body["message"], path=request.url.path)
            return JSONResponse(status_code=status, content=body)

        return handler


__all__ = ["SearchExceptionMapper"]
