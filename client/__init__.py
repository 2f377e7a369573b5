"""
client package: consumer-side adapter for the Blog Generator API.

- blog_api: `BlogApiClient.generate_blog()` wraps the HTTP call, mirrors the server's prompt bounds
  and normalizes every failure into `BlogApiError`.
- state: `BlogGenerationController`, the idle/loading/success/error state machine a user interface
  drives on top of the client.
"""

from .blog_api import BlogApiClient, BlogApiError
from .state import BlogGenerationController, BlogGenerationState, BlogStatus

__all__ = [
    "BlogApiClient",
    "BlogApiError",
    "BlogGenerationController",
    "BlogGenerationState",
    "BlogStatus",
]
