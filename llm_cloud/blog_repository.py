"""
blog_repository.py – data layer for blog generation.

This module owns every conversation with the upstream chat-completion endpoint. It builds the
two-message request (fixed system instruction plus the user's topic), sends it through an injected
OpenAI-compatible client, and converts whatever comes back into a `Result`:

- a non-empty completion text becomes `Ok(UpstreamCompletion)`;
- HTTP 503 becomes MODEL_LOADING/503 (hosted models answer 503 while they cold-start);
- HTTP 429 becomes RATE_LIMITED/429;
- any other HTTP status becomes GENERATION_FAILED with the upstream status mirrored;
- transport failures and timeouts become GENERATION_FAILED/500;
- a 2xx response without completion text becomes GENERATION_FAILED/500.

Each call makes exactly one upstream attempt. The client is built with retries disabled and a
bounded timeout (see llm_cloud.provider), so a slow upstream fails the request instead of parking
it. The API key lives inside the client and is never logged here.
"""

from typing import Any, Optional

from openai import APIConnectionError, APIError, APIStatusError, OpenAIError

from config import Settings
from config.logging_config import get_logger
from llm_cloud.prompts import build_messages
from monitoring.metrics import LLM_REQUEST_TIME, record_error, track_latency
from shared.models import UpstreamCompletion
from shared.result import DomainError, Err, ErrorCode, Ok, Result

MODEL_LOADING_MESSAGE = "Model is loading. Please try again in a few seconds."
RATE_LIMITED_MESSAGE = "API rate limit exceeded. Please try again later."
GENERATION_FAILED_MESSAGE = "Failed to generate blog content"
INVALID_RESPONSE_MESSAGE = "Invalid response structure from AI model"


def _extract_content(response: Any) -> Optional[str]:
    """Return `choices[0].message.content` when it is a non-empty string, else None."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if isinstance(content, str) and content:
        return content
    return None


def _upstream_error_message(exc: APIStatusError) -> str:
    """
    Pick the human-readable message out of an upstream error body.

    The SDK unwraps the `error` key of the JSON body, which the router fills either with a plain
    string or with an object carrying `message`.
    """
    body = getattr(exc, "body", None)
    if isinstance(body, str) and body.strip():
        return body.strip()
    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return GENERATION_FAILED_MESSAGE


class BlogRepository:
    """
    Upstream client for the blog generator.

    Args:
        client: OpenAI-compatible client (`openai.OpenAI` in production, a mock in tests).
        settings (Settings): Model id and generation parameters.
        logger: Optional structured logger; defaults to this module's logger.
    """

    def __init__(self, client: Any, settings: Settings, logger=None):
        self.client = client
        self.model = settings.llm_model
        self.max_tokens = settings.llm_max_tokens
        self.temperature = settings.llm_temperature
        self.probe_timeout = settings.llm_probe_timeout
        self.logger = logger or get_logger(__name__)

    def generate_content(self, prompt: str, trace_id: str) -> Result[UpstreamCompletion]:
        """
        Ask the upstream model for a blog post on `prompt`.

        Args:
            prompt (str): Sanitized topic.
            trace_id (str): Request trace id, used for log correlation only.

        Returns:
            Result[UpstreamCompletion]: Ok with the markdown text and model id, or Err carrying a
            MODEL_LOADING, RATE_LIMITED or GENERATION_FAILED DomainError.
        """
        self.logger.debug("Calling upstream chat completion", extra={"traceId": trace_id, "model": self.model})

        try:
            with track_latency(LLM_REQUEST_TIME, model=self.model):
                response = self.client.chat.completions.create(
                    model=self.model,
                    messages=build_messages(prompt),
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    stream=False,
                )
        except APIStatusError as exc:
            return self._fail(self._map_status_error(exc), trace_id, str(exc), exc.status_code)
        except APIConnectionError as exc:
            # APITimeoutError is a subclass: the bounded timeout lands here
            error = DomainError(ErrorCode.GENERATION_FAILED, GENERATION_FAILED_MESSAGE, 500)
            return self._fail(error, trace_id, str(exc) or type(exc).__name__, None)
        except APIError as exc:
            error = DomainError(ErrorCode.GENERATION_FAILED, GENERATION_FAILED_MESSAGE, 500)
            return self._fail(error, trace_id, str(exc), None)

        content = _extract_content(response)
        if content is None:
            error = DomainError(ErrorCode.GENERATION_FAILED, INVALID_RESPONSE_MESSAGE, 500)
            return self._fail(error, trace_id, INVALID_RESPONSE_MESSAGE, None)

        return Ok(UpstreamCompletion(content=content, model=self.model))

    def check_reachability(self, trace_id: Optional[str] = None) -> bool:
        """
        Lightweight readiness probe: list models with a short timeout.

        Never raises; failures are logged at warning level and reported as False.
        """
        try:
            self.client.with_options(timeout=self.probe_timeout).models.list()
            return True
        except OpenAIError as exc:
            self.logger.warning(
                "Readiness check failed",
                extra={"traceId": trace_id, "check": "api", "error": str(exc) or type(exc).__name__},
            )
            return False

    @staticmethod
    def _map_status_error(exc: APIStatusError) -> DomainError:
        # Most specific statuses first
        status = exc.status_code
        if status == 503:
            return DomainError(ErrorCode.MODEL_LOADING, MODEL_LOADING_MESSAGE, 503)
        if status == 429:
            return DomainError(ErrorCode.RATE_LIMITED, RATE_LIMITED_MESSAGE, 429)
        return DomainError(ErrorCode.GENERATION_FAILED, _upstream_error_message(exc), status or 500)

    def _fail(self, error: DomainError, trace_id: str, detail: str, status: Optional[int]) -> Err:
        extra = {"traceId": trace_id, "error": detail, "status": status, "code": error.code.value}
        if error.code is ErrorCode.RATE_LIMITED:
            extra["source"] = "upstream"
        self.logger.error("Upstream API error", extra=extra)
        record_error(error.code.value, "blog_repository")
        return Err(error)
