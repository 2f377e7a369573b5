"""Top-level package exports for llm_cloud.

This package holds the upstream LLM infrastructure:
    • provider.py        – OpenAI-compatible client configuration
    • prompts.py         – system/user prompt templates
    • blog_repository.py – chat-completion call and upstream error mapping
"""

from .blog_repository import BlogRepository
from .provider import get_client

__all__ = [
    "BlogRepository",
    "get_client",
]
