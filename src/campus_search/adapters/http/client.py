"""HTTP adapter – HttpxHttpClient, the async transport under the data-source adapters."""
from __future__ import annotations

from typing import Any, Collection

from campus_search.kernel.errors import ExternalServiceError, TimeoutError as AppTimeoutError
from campus_search.observability.logging import get_logger

logger = get_logger(__name__)

_BODY_PREVIEW = 500


def _require_httpx() -> Any:
    try:
        import httpx
        return httpx
    except ImportError as exc:
        raise ImportError("Install 'httpx' to use the HTTP adapter") from exc


class HttpxHttpClient:
    """Async ``httpx.AsyncClient`` that raises kernel errors instead of httpx ones.

    * timeouts become :class:`~campus_search.kernel.errors.TimeoutError`
    * 4xx/5xx responses become :class:`ExternalServiceError` carrying the
      status, a body preview and the response headers
    * connection failures become :class:`ExternalServiceError` with no status

    Statuses listed in ``allow_status`` are handed back to the caller
    unchanged. ``service`` names the upstream in errors and log events.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        *,
        service: str | None = None,
        **kwargs: Any,
    ) -> None:
        httpx = _require_httpx()
        self._service = service or base_url or "http"
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, **kwargs)

    @property
    def service(self) -> str:
        return self._service

    async def __aenter__(self) -> "HttpxHttpClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, *, allow_status: Collection[int] = (), **kwargs: Any) -> Any:
        httpx = _require_httpx()
        try:
            response = await self._client.get(url, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("http.timeout", service=self._service, url=url)
            raise AppTimeoutError(f"{self._service} did not answer GET {url} in time", cause=exc) from exc
        except httpx.HTTPError as exc:
            logger.warning("http.transport_error", service=self._service, url=url, error=repr(exc))
            raise ExternalServiceError(service=self._service, message=str(exc) or repr(exc)) from exc

        if response.is_success or response.status_code in allow_status:
            return response
        logger.warning("http.bad_status", service=self._service, url=url, status_code=response.status_code)
        raise ExternalServiceError(
            service=self._service,
            message=f"{self._service} answered GET {url} with HTTP {response.status_code}",
            status_code=response.status_code,
            detail={"body": response.text[:_BODY_PREVIEW], "headers": dict(response.headers)},
        )


__all__ = ["HttpxHttpClient"]
