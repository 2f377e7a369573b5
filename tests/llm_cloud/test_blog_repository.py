"""
Unit tests for `llm_cloud/blog_repository.py` – upstream call and failure mapping.

The OpenAI client is replaced by a MagicMock. Upstream failures are simulated by raising the SDK's
own exception types (built around `httpx` request/response objects), so the tests exercise the same
`except` branches a real outage would.
"""

import unittest
from unittest.mock import MagicMock

from conftest import (
    SAMPLE_BLOG,
    make_completion,
    make_connection_error,
    make_status_error,
    make_timeout_error,
)
from config import Settings
from llm_cloud.blog_repository import (
    GENERATION_FAILED_MESSAGE,
    INVALID_RESPONSE_MESSAGE,
    MODEL_LOADING_MESSAGE,
    RATE_LIMITED_MESSAGE,
    BlogRepository,
)
from llm_cloud.prompts import SYSTEM_PROMPT
from shared.models import UpstreamCompletion
from shared.result import Err, ErrorCode, Ok


class TestBlogRepository(unittest.TestCase):
    """
    Each test drives `generate_content()` against a mocked client and checks the returned Result.
    """

    def setUp(self):
        self.settings = Settings(huggingface_api_key="secret-key", llm_model="test/model-7b")
        self.client = MagicMock()
        self.client.chat.completions.create.return_value = make_completion(SAMPLE_BLOG)
        self.repository = BlogRepository(self.client, self.settings)

    def _assert_error(self, outcome, code, status, message=None):
        self.assertIsInstance(outcome, Err)
        self.assertIs(outcome.error.code, code)
        self.assertEqual(outcome.error.status, status)
        if message is not None:
            self.assertEqual(outcome.error.message, message)

    def test_success_returns_content_and_model(self):
        outcome = self.repository.generate_content("The Future of Artificial Intelligence", "t-1")

        self.assertIsInstance(outcome, Ok)
        self.assertEqual(outcome.value, UpstreamCompletion(content=SAMPLE_BLOG, model="test/model-7b"))

    def test_request_shape(self):
        """Two messages (system instruction, then the topic), configured parameters, no streaming."""
        self.repository.generate_content("The Future of Artificial Intelligence", "t-2")

        self.client.chat.completions.create.assert_called_once()
        kwargs = self.client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "test/model-7b")
        self.assertEqual(kwargs["max_tokens"], 2000)
        self.assertEqual(kwargs["temperature"], 0.7)
        self.assertIs(kwargs["stream"], False)

        messages = kwargs["messages"]
        self.assertEqual([m["role"] for m in messages], ["system", "user"])
        self.assertEqual(messages[0]["content"], SYSTEM_PROMPT)
        self.assertIn("The Future of Artificial Intelligence", messages[1]["content"])

    def test_503_maps_to_model_loading(self):
        self.client.chat.completions.create.side_effect = make_status_error(503)

        outcome = self.repository.generate_content("topic", "t-3")

        self._assert_error(outcome, ErrorCode.MODEL_LOADING, 503, MODEL_LOADING_MESSAGE)

    def test_429_maps_to_rate_limited(self):
        self.client.chat.completions.create.side_effect = make_status_error(429)

        outcome = self.repository.generate_content("topic", "t-4")

        self._assert_error(outcome, ErrorCode.RATE_LIMITED, 429, RATE_LIMITED_MESSAGE)

    def test_other_status_is_mirrored_with_upstream_message(self):
        self.client.chat.completions.create.side_effect = make_status_error(
            502, body={"message": "Bad gateway from provider"}
        )

        outcome = self.repository.generate_content("topic", "t-5")

        self._assert_error(outcome, ErrorCode.GENERATION_FAILED, 502, "Bad gateway from provider")

    def test_status_without_message_uses_generic_text(self):
        self.client.chat.completions.create.side_effect = make_status_error(401)

        outcome = self.repository.generate_content("topic", "t-6")

        self._assert_error(outcome, ErrorCode.GENERATION_FAILED, 401, GENERATION_FAILED_MESSAGE)

    def test_connection_error_maps_to_500(self):
        self.client.chat.completions.create.side_effect = make_connection_error()

        outcome = self.repository.generate_content("topic", "t-7")

        self._assert_error(outcome, ErrorCode.GENERATION_FAILED, 500, GENERATION_FAILED_MESSAGE)

    def test_timeout_maps_to_500(self):
        self.client.chat.completions.create.side_effect = make_timeout_error()

        outcome = self.repository.generate_content("topic", "t-8")

        self._assert_error(outcome, ErrorCode.GENERATION_FAILED, 500)

    def test_missing_content_is_invalid_response(self):
        for response in (make_completion(None), make_completion(""), MagicMock(choices=[])):
            with self.subTest(response=response):
                self.client.chat.completions.create.return_value = response

                outcome = self.repository.generate_content("topic", "t-9")

                self._assert_error(outcome, ErrorCode.GENERATION_FAILED, 500, INVALID_RESPONSE_MESSAGE)

    def test_single_attempt_per_call(self):
        self.client.chat.completions.create.side_effect = make_status_error(503)

        self.repository.generate_content("topic", "t-10")

        self.assertEqual(self.client.chat.completions.create.call_count, 1)

    def test_api_key_never_logged(self):
        self.client.chat.completions.create.side_effect = make_status_error(500, body="provider exploded")

        with self.assertLogs("llm_cloud.blog_repository", level="DEBUG") as captured:
            self.repository.generate_content("topic", "t-11")

        self.assertTrue(captured.records)
        for record in captured.records:
            self.assertNotIn("secret-key", record.getMessage())
            self.assertNotIn("secret-key", str(getattr(record, "extra_fields", {})))

    def test_upstream_rate_limit_logged_with_source(self):
        self.client.chat.completions.create.side_effect = make_status_error(429)

        with self.assertLogs("llm_cloud.blog_repository", level="ERROR") as captured:
            self.repository.generate_content("topic", "t-12")

        record = captured.records[-1]
        self.assertEqual(record.extra_fields["source"], "upstream")
        self.assertEqual(record.extra_fields["traceId"], "t-12")


class TestReachability(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.repository = BlogRepository(self.client, Settings(huggingface_api_key="k"))

    def test_probe_uses_short_timeout(self):
        self.assertTrue(self.repository.check_reachability("t-1"))
        self.client.with_options.assert_called_once_with(timeout=5.0)
        self.client.with_options.return_value.models.list.assert_called_once()

    def test_probe_failure_reports_false(self):
        self.client.with_options.return_value.models.list.side_effect = make_connection_error()

        self.assertFalse(self.repository.check_reachability("t-2"))

    def test_probe_status_error_reports_false(self):
        self.client.with_options.return_value.models.list.side_effect = make_status_error(401)

        self.assertFalse(self.repository.check_reachability())
