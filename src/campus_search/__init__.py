"""
campus_search – institution search subsystem.

Import path convention::

    from campus_search.application.search import QueryExpander, FilterEngine
    from campus_search.application.cache import ResponseCache, create_response_cache
    from campus_search.application.compression import CompressionNegotiator
    from campus_search.observability.metrics import MetricsCollector
    from campus_search.adapters.fastapi import create_app
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
