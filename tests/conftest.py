"""
conftest.py – shared pytest bootstrap and fixtures.

Pytest imports this module before collecting any test file, which lets us:
1) Put the project root on `sys.path` so `from services ...`, `from middleware ...` resolve without
   an editable install.
2) Provide the upstream credential the configuration layer requires. `main` builds its module-level
   app at import time, so the variable must exist before any test imports it.

Fixtures build a fresh application per test through `create_app()` with a MagicMock standing in for
the OpenAI client, so no request ever leaves the process and rate-limit counters never leak between
tests. Logging is left to pytest (`configure_logging=False`) so `caplog` keeps working.
"""

import os
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

# Ensure project root is on sys.path for direct imports like `services`, `shared`, etc.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Provide required environment defaults for tests
os.environ.setdefault("HUGGINGFACE_API_KEY", "test-key")

from fastapi.testclient import TestClient  # noqa: E402

from config import Settings  # noqa: E402
from main import create_app  # noqa: E402

UPSTREAM_URL = "https://router.huggingface.co/v1/chat/completions"
SAMPLE_BLOG = "# Title\n\nBody text here."


def make_completion(content):
    """Shape of `client.chat.completions.create(...)` return value that the repository reads."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_status_error(status, body=None):
    request = httpx.Request("POST", UPSTREAM_URL)
    response = httpx.Response(status, request=request)
    return openai.APIStatusError(f"Error code: {status}", response=response, body=body)


def make_connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", UPSTREAM_URL))


def make_timeout_error():
    return openai.APITimeoutError(request=httpx.Request("POST", UPSTREAM_URL))


@pytest.fixture
def settings():
    return Settings(
        huggingface_api_key="test-key",
        app_env="test",
        rate_limit_max=5,
        rate_limit_window_ms=60000,
        max_body_bytes=1024,
    )


@pytest.fixture
def llm_client():
    client = MagicMock()
    client.chat.completions.create.return_value = make_completion(SAMPLE_BLOG)
    return client


@pytest.fixture
def app(settings, llm_client):
    return create_app(settings=settings, llm_client=llm_client, configure_logging=False)


@pytest.fixture
def client(app):
    return TestClient(app)
