"""HTTP adapter – async HTTP client wrapper."""
from campus_search.adapters.http.client import HttpxHttpClient

__all__ = ["HttpxHttpClient"]
