"""
provider.py – upstream chat-completion client.

The Hugging Face router speaks the OpenAI chat-completion protocol, so the official `openai` SDK is
pointed at it through `base_url`. This is the only module that touches the credential; the
repository receives a ready client and never sees the key. Tests skip `get_client()` entirely and
hand `create_app()` a mock instead.
"""

from openai import OpenAI

from config import Settings
from config.logging_config import get_logger

logger = get_logger(__name__)


def get_client(settings: Settings) -> OpenAI:
    """
    Build an OpenAI client targeting the configured chat-completion endpoint.

    Retries are disabled (the SDK retries twice by default) so a generation request makes at most
    one upstream attempt. The timeout bounds every call made through the client; the readiness
    probe narrows it per call with `with_options`.

    Args:
        settings (Settings): Validated runtime settings (base URL, credential, timeout).

    Returns:
        OpenAI: A ready-to-use client.
    """
    logger.info(
        "LLM client configured",
        extra={"baseUrl": settings.llm_base_url, "model": settings.llm_model, "timeoutS": settings.llm_timeout},
    )
    return OpenAI(
        base_url=settings.llm_base_url,
        api_key=settings.huggingface_api_key,
        timeout=settings.llm_timeout,
        max_retries=0,
    )
