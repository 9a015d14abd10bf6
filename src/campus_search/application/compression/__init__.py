"""Application compression – response body negotiation."""
from campus_search.application.compression.negotiator import (
    CompressedPayload,
    CompressionNegotiator,
    CompressionOptions,
    CompressionStats,
    ContentEncoding,
    estimate_compression_savings,
    parse_accept_encoding,
    serialize_payload,
)

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
