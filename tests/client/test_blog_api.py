"""
Unit tests for `client/blog_api.py` – the consumer-side HTTP adapter.

Covers:
- Client-side prompt checks raising BlogApiError before any network traffic
- Success envelope parsed into GenerationResult
- Server error envelopes surfaced with their message, code and requestId
- Non-JSON and malformed bodies, network errors and timeouts

Mocks:
- `client.blog_api.urlrequest.urlopen` to avoid real HTTP
"""

import io
import json
import socket
import unittest
from unittest.mock import MagicMock, patch
from urllib import error as urlerror

from client.blog_api import BlogApiClient, BlogApiError

SUCCESS_BODY = {
    "success": True,
    "blog": "# Title\n\nBody text here.",
    "prompt": "The Future of Artificial Intelligence",
    "meta": {"wordCount": 4, "model": "org/model", "generatedAt": 1700000000000},
}


def _response(payload, status=200):
    raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
    resp = MagicMock()
    resp.status = status
    resp.read.return_value = raw
    resp.__enter__.return_value = resp
    return resp


def _http_error(status, payload):
    raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
    return urlerror.HTTPError(
        "http://localhost:5000/api/v1/blog/generate", status, "error", {}, io.BytesIO(raw)
    )


class TestBlogApiClient(unittest.TestCase):
    def setUp(self):
        self.client = BlogApiClient("http://localhost:5000/")

    def test_generate_url(self):
        self.assertEqual(self.client.generate_url, "http://localhost:5000/api/v1/blog/generate")

    @patch("client.blog_api.urlrequest.urlopen")
    def test_success(self, mock_urlopen):
        mock_urlopen.return_value = _response(SUCCESS_BODY)

        result = self.client.generate_blog("  The Future of Artificial Intelligence  ")

        self.assertEqual(result.blog, SUCCESS_BODY["blog"])
        self.assertEqual(result.prompt, SUCCESS_BODY["prompt"])
        self.assertEqual(result.meta.word_count, 4)
        self.assertEqual(result.meta.model, "org/model")
        self.assertEqual(result.meta.generated_at, 1700000000000)

        request = mock_urlopen.call_args.args[0]
        self.assertEqual(request.get_method(), "POST")
        self.assertEqual(request.full_url, "http://localhost:5000/api/v1/blog/generate")
        self.assertEqual(json.loads(request.data), {"prompt": "The Future of Artificial Intelligence"})
        self.assertEqual(request.get_header("Content-type"), "application/json")

    @patch("client.blog_api.urlrequest.urlopen")
    def test_client_side_validation_skips_network(self, mock_urlopen):
        cases = [
            (None, "Invalid prompt provided"),
            ("", "Invalid prompt provided"),
            (42, "Invalid prompt provided"),
            ("  ab  ", "Prompt must be at least 3 characters"),
            ("a" * 501, "Prompt must not exceed 500 characters"),
        ]
        for prompt, message in cases:
            with self.subTest(prompt=prompt):
                with self.assertRaises(BlogApiError) as ctx:
                    self.client.generate_blog(prompt)
                self.assertEqual(ctx.exception.message, message)
        mock_urlopen.assert_not_called()

    @patch("client.blog_api.urlrequest.urlopen")
    def test_server_error_envelope(self, mock_urlopen):
        mock_urlopen.side_effect = _http_error(503, {
            "success": False,
            "error": "Model is loading. Please try again in a few seconds.",
            "code": "MODEL_LOADING",
            "requestId": "req-42",
        })

        with self.assertRaises(BlogApiError) as ctx:
            self.client.generate_blog("Serverless architectures")

        err = ctx.exception
        self.assertEqual(err.message, "Model is loading. Please try again in a few seconds.")
        self.assertEqual(err.code, "MODEL_LOADING")
        self.assertEqual(err.request_id, "req-42")
        self.assertEqual(err.status, 503)

    @patch("client.blog_api.urlrequest.urlopen")
    def test_server_error_without_json_body(self, mock_urlopen):
        mock_urlopen.side_effect = _http_error(502, b"<html>Bad Gateway</html>")

        with self.assertRaises(BlogApiError) as ctx:
            self.client.generate_blog("Serverless architectures")

        self.assertEqual(ctx.exception.message, "Request failed with status 502")
        self.assertIsNone(ctx.exception.code)

    @patch("client.blog_api.urlrequest.urlopen")
    def test_success_status_with_invalid_envelope(self, mock_urlopen):
        for body in ({"success": False, "blog": "x"}, {"success": True}, {"success": True, "blog": 5}, b"", b"oops"):
            with self.subTest(body=body):
                mock_urlopen.return_value = _response(body)
                with self.assertRaises(BlogApiError) as ctx:
                    self.client.generate_blog("Serverless architectures")
                self.assertEqual(ctx.exception.message, "Invalid response from server")

    @patch("client.blog_api.urlrequest.urlopen")
    def test_network_error(self, mock_urlopen):
        mock_urlopen.side_effect = urlerror.URLError("Connection refused")

        with self.assertRaises(BlogApiError) as ctx:
            self.client.generate_blog("Serverless architectures")

        self.assertIn("Connection refused", ctx.exception.message)
        self.assertIsNone(ctx.exception.status)

    @patch("client.blog_api.urlrequest.urlopen")
    def test_timeout(self, mock_urlopen):
        mock_urlopen.side_effect = socket.timeout("timed out")

        with self.assertRaises(BlogApiError) as ctx:
            BlogApiClient(timeout_s=1.5).generate_blog("Serverless architectures")

        self.assertEqual(ctx.exception.message, "Request timed out after 1.5s")
