"""
UI state machine for blog generation.

States are idle, loading, success and error. `submit()` moves to loading and then to success or
error depending on the client call; `reset()` returns to idle from any state. Each transition
replaces the whole state object, and an optional listener is told about every new state so a user
interface can re-render (for example to show a spinner while loading).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from client.blog_api import BlogApiClient, BlogApiError
from shared.models import GenerationMeta

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class BlogStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class BlogGenerationState:
    status: BlogStatus = BlogStatus.IDLE
    blog: Optional[str] = None
    prompt: Optional[str] = None
    meta: Optional[GenerationMeta] = None
    error: Optional[str] = None
    request_id: Optional[str] = None


INITIAL_STATE = BlogGenerationState()


class BlogGenerationController:
    """
    Drive a BlogApiClient through the idle/loading/success/error states.

    Args:
        client (BlogApiClient): Client used by `submit`.
        on_change (Callable, optional): Called with each new state.
    """

    def __init__(self, client: BlogApiClient,
                 on_change: Optional[Callable[[BlogGenerationState], None]] = None):
        self.client = client
        self.on_change = on_change
        self.state = INITIAL_STATE

    def _transition(self, state: BlogGenerationState) -> BlogGenerationState:
        self.state = state
        if self.on_change is not None:
            self.on_change(state)
        return state

    def submit(self, prompt: str) -> BlogGenerationState:
        self._transition(BlogGenerationState(status=BlogStatus.LOADING))
        try:
            result = self.client.generate_blog(prompt)
        except BlogApiError as exc:
            return self._transition(BlogGenerationState(
                status=BlogStatus.ERROR,
                error=exc.message or UNEXPECTED_ERROR_MESSAGE,
                request_id=exc.request_id,
            ))
        except Exception:
            return self._transition(BlogGenerationState(status=BlogStatus.ERROR, error=UNEXPECTED_ERROR_MESSAGE))

        return self._transition(BlogGenerationState(
            status=BlogStatus.SUCCESS,
            blog=result.blog,
            prompt=result.prompt,
            meta=result.meta,
        ))

    def reset(self) -> BlogGenerationState:
        return self._transition(INITIAL_STATE)
