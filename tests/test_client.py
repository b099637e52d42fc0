import unittest
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock

import httpx
import openai

from claude_cli import ClaudeClientWrapper
from claude_cli.core import ApiError
from claude_cli.core.client import ANTHROPIC_BASE_URL, ANTHROPIC_VERSION, create_client

URL = ANTHROPIC_BASE_URL + "chat/completions"


def _raw_response(text):
    return Mock(http_response=Mock(text=text))


class TestClaudeClientWrapper(unittest.TestCase):
    def setUp(self):
        self.mock_client = Mock()
        self.create = self.mock_client.chat.completions.with_raw_response.create
        self.wrapper = ClaudeClientWrapper(self.mock_client)

    def test_chat_response(self):
        body = '{"choices": [{"message": {"content": "Hello! How can I help you today?"}}]}'
        self.create.return_value = _raw_response(body)

        self.assertEqual(self.wrapper.chat("Hello", "claude-3-sonnet"), body)
        self.create.assert_called_once_with(
            model="claude-3-sonnet",
            messages=[{"role": "user", "content": "Hello"}],
        )

    def test_error_status_carries_body(self):
        request = httpx.Request("POST", URL)
        response = httpx.Response(401, text='{"error": "invalid x-api-key"}', request=request)
        self.create.side_effect = openai.AuthenticationError(
            "invalid x-api-key", response=response, body=None
        )

        with self.assertRaises(ApiError) as ctx:
            self.wrapper.chat("Test", "claude-3-sonnet")

        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.body, '{"error": "invalid x-api-key"}')
        self.assertIn("invalid x-api-key", str(ctx.exception))

    def test_network_failure(self):
        self.create.side_effect = openai.APIConnectionError(request=httpx.Request("POST", URL))

        with self.assertRaises(ApiError) as ctx:
            self.wrapper.chat("Test", "claude-3-sonnet")
        self.assertIsNone(ctx.exception.status_code)

    def test_model_list(self):
        self.mock_client.models.list.return_value = [
            Mock(id="claude-3-opus"),
            Mock(id="claude-3-sonnet"),
        ]
        models = self.wrapper.list_models()

        self.assertEqual(len(models), 2)
        self.assertIn("claude-3-sonnet", models)

    def test_concurrent_requests(self):
        self.create.side_effect = lambda model, messages: _raw_response(
            f"Response to: {messages[0]['content']}"
        )

        with ThreadPoolExecutor(max_workers=3) as pool:
            results = list(
                pool.map(lambda m: self.wrapper.chat(m, "claude-3-sonnet"), ["First", "Second", "Third"])
            )

        self.assertEqual(
            results, ["Response to: First", "Response to: Second", "Response to: Third"]
        )


class TestCreateClient(unittest.TestCase):
    def test_client_creation(self):
        client = create_client("test-key")

        self.assertEqual(client.api_key, "test-key")
        self.assertEqual(str(client.base_url), ANTHROPIC_BASE_URL)
        self.assertEqual(client.max_retries, 0)
        self.assertEqual(client.default_headers["x-api-key"], "test-key")
        self.assertEqual(client.default_headers["anthropic-version"], ANTHROPIC_VERSION)
