"""
shared/models.py

Common data models used by the blog generation pipeline.

The request body is a pydantic model so FastAPI can parse it; its `prompt` field is deliberately
untyped because type and length checks belong to the service, which reports them with the
INVALID_PROMPT code instead of FastAPI's generic validation error. Everything produced inside the
pipeline is a plain frozen dataclass with a `to_dict()` that renders the camelCase wire shape.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class GenerateBlogRequest(BaseModel):
    """
    Request payload for POST /api/v1/blog/generate.

    Fields:
        prompt: The blog topic. Validated and sanitized by BlogService (3-500 characters).
    """

    prompt: Optional[Any] = Field(None, description="Blog topic, 3-500 characters")


@dataclass(frozen=True)
class TraceContext:
    """Per-request correlation id, taken from the inbound x-trace-id header or generated."""
    trace_id: str


@dataclass(frozen=True)
class UpstreamCompletion:
    """Text returned by the chat-completion endpoint together with the model that produced it."""
    content: str
    model: str


@dataclass(frozen=True)
class GenerationMeta:
    word_count: int
    model: str
    generated_at: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wordCount": self.word_count,
            "model": self.model,
            "generatedAt": self.generated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationMeta":
        return cls(
            word_count=int(data.get("wordCount", 0)),
            model=str(data.get("model", "")),
            generated_at=int(data.get("generatedAt", 0)),
        )


@dataclass(frozen=True)
class GenerationResult:
    """
    Outcome of one successful generation.

    `generated_at` in the meta block is Unix time in milliseconds. Nothing here is retained after
    the HTTP response is written.
    """
    blog: str
    prompt: str
    meta: GenerationMeta

    def to_dict(self) -> Dict[str, Any]:
        """Render the success payload (without the `success` flag)."""
        return {
            "blog": self.blog,
            "prompt": self.prompt,
            "meta": self.meta.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationResult":
        meta = data.get("meta") if isinstance(data.get("meta"), dict) else {}
        return cls(
            blog=str(data.get("blog", "")),
            prompt=str(data.get("prompt", "")),
            meta=GenerationMeta.from_dict(meta),
        )


def now_millis() -> int:
    return int(time.time() * 1000)
