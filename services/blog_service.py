"""
Blog domain service: prompt validation, sanitization, and generation bookkeeping.

The service sits between the HTTP layer and the repository. It rejects unusable prompts before any
network traffic happens, cleans the accepted ones, delegates generation to the repository, and
attaches metadata (word count, model id, generation time) to the result. It keeps no state between
calls, so a single instance is shared by all requests.
"""

import re
import time
from typing import Any, Optional

from config.logging_config import get_logger
from llm_cloud.blog_repository import BlogRepository
from monitoring.metrics import record_error
from shared.models import GenerationMeta, GenerationResult, now_millis
from shared.result import Err, Ok, Result, invalid_prompt

PROMPT_MIN_LENGTH = 3
PROMPT_MAX_LENGTH = 500

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
# Tokens consisting only of markdown markup characters
_MARKUP_TOKEN = re.compile(r"^[#*>|`~=+_-]+$")


def sanitize_prompt(prompt: str) -> str:
    """
    Strip ASCII control characters (0x00-0x1F, 0x7F) and surrounding whitespace.

    Control characters are removed before trimming so the result never ends in whitespace that
    was hidden behind one; applying the function twice yields the same string.
    """
    return _CONTROL_CHARS.sub("", prompt).strip()


def count_words(text: str) -> int:
    """
    Number of words in `text`.

    Any run of Unicode whitespace separates tokens, and leading or trailing whitespace yields no
    empty token. Every token counts except bare markdown markup ("#", "##", "-", "*", ">", "---",
    "|"), which structures the post rather than adding words to it. Prose punctuation such as a
    free-standing em dash still counts.
    """
    return sum(1 for token in text.split() if not _MARKUP_TOKEN.match(token))


def validate_prompt(prompt: Any) -> Optional[str]:
    """
    Check a raw prompt against the accepted bounds.

    Returns:
        Optional[str]: None when the prompt is usable, otherwise a message naming the violated rule.
    """
    if not prompt or not isinstance(prompt, str):
        return "Prompt is required and must be a string"

    length = len(sanitize_prompt(prompt))
    if length < PROMPT_MIN_LENGTH:
        return f"Prompt must be at least {PROMPT_MIN_LENGTH} characters"
    if length > PROMPT_MAX_LENGTH:
        return f"Prompt must not exceed {PROMPT_MAX_LENGTH} characters"
    return None


class BlogService:
    """
    Validate and generate a blog post from a prompt.

    Args:
        repository (BlogRepository): Upstream client used for content generation.
        logger: Optional structured logger; defaults to this module's logger.
    """

    def __init__(self, repository: BlogRepository, logger=None):
        self.repository = repository
        self.logger = logger or get_logger(__name__)

    def generate(self, raw_prompt: Any, trace_id: str) -> Result[GenerationResult]:
        """
        Turn a raw prompt into a GenerationResult.

        Args:
            raw_prompt (Any): Value of the `prompt` field as received; may be of any JSON type.
            trace_id (str): Request trace id for log correlation.

        Returns:
            Result[GenerationResult]: Ok with the blog and its metadata, or Err with
            INVALID_PROMPT (no upstream call made) or the repository's error unchanged.
        """
        problem = validate_prompt(raw_prompt)
        if problem is not None:
            self.logger.info("Prompt rejected", extra={"traceId": trace_id, "code": "INVALID_PROMPT", "reason": problem})
            record_error("INVALID_PROMPT", "blog_service")
            return invalid_prompt(problem)

        prompt = sanitize_prompt(raw_prompt)
        self.logger.info("Generating blog", extra={"traceId": trace_id, "promptLength": len(prompt)})

        start = time.perf_counter()
        outcome = self.repository.generate_content(prompt, trace_id)
        duration_ms = int((time.perf_counter() - start) * 1000)

        if isinstance(outcome, Err):
            self.logger.warning(
                "Blog generation failed",
                extra={
                    "traceId": trace_id,
                    "code": outcome.error.code.value,
                    "error": outcome.error.message,
                    "durationMs": duration_ms,
                },
            )
            return outcome

        completion = outcome.value
        word_count = count_words(completion.content)
        self.logger.info(
            "Blog generated",
            extra={
                "traceId": trace_id,
                "wordCount": word_count,
                "durationMs": duration_ms,
                "model": completion.model,
            },
        )

        return Ok(GenerationResult(
            blog=completion.content,
            prompt=prompt,
            meta=GenerationMeta(
                word_count=word_count,
                model=completion.model,
                generated_at=now_millis(),
            ),
        ))
