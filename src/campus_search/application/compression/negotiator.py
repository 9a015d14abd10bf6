"""Application compression – Accept-Encoding negotiation for JSON payloads.

Preference is fixed: ``br`` when the client accepts it, then ``gzip``, then
the uncompressed body. Payloads under the threshold are never compressed,
and ``Vary: Accept-Encoding`` is always emitted so shared caches keep the
variants apart.
"""
from __future__ import annotations

import asyncio
import gzip
import json
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

from campus_search.observability.logging import get_logger

__all__ = [
    "CompressedPayload",
    "CompressionNegotiator",
    "CompressionOptions",
    "CompressionStats",
    "ContentEncoding",
    "estimate_compression_savings",
    "parse_accept_encoding",
    "serialize_payload",
]

logger = get_logger(__name__)

_TYPICAL_JSON_RATIOS = {"br": 4.0, "gzip": 3.0}


def _require_brotli() -> Any:
    try:
        import brotli
        return brotli
    except ImportError as exc:
        raise ImportError("Install 'brotli' to enable br response compression") from exc


class ContentEncoding(str, Enum):
    BR = "br"
    GZIP = "gzip"
    IDENTITY = "identity"


@dataclass(frozen=True)
class CompressionOptions:
    threshold: int = 1024
    brotli_quality: int = 4
    gzip_level: int = 6
    force_encoding: ContentEncoding | None = None

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise ValueError("threshold must be >= 0")
        if not 0 <= self.brotli_quality <= 11:
            raise ValueError("brotli_quality must be within 0..11")
        if not 0 <= self.gzip_level <= 9:
            raise ValueError("gzip_level must be within 0..9")


@dataclass(frozen=True)
class CompressionStats:
    original_size: int
    compressed_size: int
    ratio: float
    encoding: ContentEncoding
    duration_ms: float

    @property
    def compressed(self) -> bool:
        return self.encoding is not ContentEncoding.IDENTITY


@dataclass(frozen=True)
class CompressedPayload:
    body: bytes
    content_encoding: ContentEncoding
    stats: CompressionStats
    media_type: str = "application/json"

    @property
    def headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": self.media_type,
            "Content-Length": str(len(self.body)),
            "Vary": "Accept-Encoding",
        }
        if self.content_encoding is not ContentEncoding.IDENTITY:
            headers["Content-Encoding"] = self.content_encoding.value
        return headers


def parse_accept_encoding(header: str | None) -> dict[str, float]:
    """Map each listed coding to its q-value; malformed q-values count as 1."""
    accepted: dict[str, float] = {}
    for item in (header or "").split(","):
        name, _, params = item.strip().partition(";")
        name = name.strip().lower()
        if not name:
            continue
        quality = 1.0
        for param in params.split(";"):
            key, _, value = param.strip().partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 1.0
        accepted[name] = quality
    return accepted


def serialize_payload(payload: Any) -> bytes:
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str).encode("utf-8")


def estimate_compression_savings(payload: Any, encoding: ContentEncoding = ContentEncoding.BR) -> dict[str, Any]:
    """Size estimate from typical JSON ratios, without compressing anything."""
    original = len(serialize_payload(payload))
    ratio = _TYPICAL_JSON_RATIOS.get(encoding.value, 1.0)
    return {
        "original_size": original,
        "estimated_ratio": ratio,
        "estimated_size": int(original / ratio),
    }


class CompressionNegotiator:
    def __init__(self, options: CompressionOptions | None = None) -> None:
        self.options = options or CompressionOptions()

    def choose_encoding(self, accept_encoding: str | None) -> ContentEncoding:
        if self.options.force_encoding is not None:
            return self.options.force_encoding
        accepted = parse_accept_encoding(accept_encoding)
        wildcard = accepted.get("*", 0.0)
        for candidate in (ContentEncoding.BR, ContentEncoding.GZIP):
            if accepted.get(candidate.value, wildcard) > 0:
                return candidate
        return ContentEncoding.IDENTITY

    def _compress(self, data: bytes, encoding: ContentEncoding) -> bytes:
        match encoding:
            case ContentEncoding.BR:
                return _require_brotli().compress(data, quality=self.options.brotli_quality)
            case ContentEncoding.GZIP:
                return gzip.compress(data, compresslevel=self.options.gzip_level)
            case ContentEncoding.IDENTITY:
                return data

    def negotiate(self, accept_encoding: str | None, payload: Any) -> CompressedPayload:
        t0 = time.perf_counter()
        data = serialize_payload(payload)
        encoding = ContentEncoding.IDENTITY
        if len(data) >= self.options.threshold:
            encoding = self.choose_encoding(accept_encoding)

        body = data
        if encoding is not ContentEncoding.IDENTITY:
            try:
                body = self._compress(data, encoding)
            except Exception as exc:
                logger.error("compression.failed", encoding=encoding.value, size=len(data), error=str(exc))
                body, encoding = data, ContentEncoding.IDENTITY

        stats = CompressionStats(
            original_size=len(data),
            compressed_size=len(body),
            ratio=len(data) / len(body) if body else 1.0,
            encoding=encoding,
            duration_ms=(time.perf_counter() - t0) * 1000,
        )
        return CompressedPayload(body=body, content_encoding=encoding, stats=stats)

    async def negotiate_async(self, accept_encoding: str | None, payload: Any) -> CompressedPayload:
        """:meth:`negotiate` on a worker thread so the event loop stays free."""
        return await asyncio.to_thread(self.negotiate, accept_encoding, payload)
