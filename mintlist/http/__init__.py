"""
HTTP Client Module

Async HTTP client for fetching published artifacts.
"""

from .client import AsyncHttpClient, HttpError, HttpResponse

__all__ = [
    "AsyncHttpClient",
    "HttpError",
    "HttpResponse",
]
