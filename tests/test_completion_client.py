from pathlib import Path
import sys
import tempfile
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from ideagpt.completion.client import (
    CompletionClient,
    CompletionRequestError,
    RequestsCompletionTransport,
    build_completion_client,
)
from ideagpt.completion.types import CompletionRequest, TransportResponse
from ideagpt.config.settings import load_settings


API_URL = "https://api.openai.com/v1/completions"


class _FakeTransport:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def post_form(self, url, *, headers, fields, timeout_seconds):
        self.calls.append(
            {
                "url": url,
                "headers": dict(headers),
                "fields": list(fields),
                "timeout_seconds": timeout_seconds,
            }
        )
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


def _client(transport, **overrides):
    options = {
        "api_key": "sk-secret",
        "endpoint": API_URL,
        "model": "gpt-4",
        "max_tokens": 100,
        "transport": transport,
    }
    options.update(overrides)
    return CompletionClient(**options)


class CompletionRequestTests(unittest.TestCase):
    def test_form_fields_are_ordered_and_stringified(self):
        request = CompletionRequest(model="gpt-4", prompt="hi there", max_tokens=100)

        self.assertEqual(
            request.form_fields(),
            [("model", "gpt-4"), ("prompt", "hi there"), ("max_tokens", "100")],
        )


class CompletionClientTests(unittest.TestCase):
    def test_request_carries_fields_header_and_endpoint(self):
        transport = _FakeTransport(TransportResponse(status_code=200, body="ok"))

        _client(transport).complete("Give me a startup idea")

        self.assertEqual(len(transport.calls), 1)
        call = transport.calls[0]
        self.assertEqual(call["url"], API_URL)
        self.assertEqual(call["headers"], {"Authorization": "Bearer sk-secret"})
        self.assertEqual(
            call["fields"],
            [("model", "gpt-4"), ("prompt", "Give me a startup idea"), ("max_tokens", "100")],
        )
        self.assertIsNone(call["timeout_seconds"])

    def test_prompt_is_sent_unmodified(self):
        prompt = "  multi\nline & special=chars?  "
        transport = _FakeTransport(TransportResponse(status_code=200, body="ok"))

        _client(transport).complete(prompt)

        self.assertIn(("prompt", prompt), transport.calls[0]["fields"])

    def test_empty_prompt_is_not_rejected_by_client(self):
        transport = _FakeTransport(TransportResponse(status_code=200, body="ok"))

        self.assertEqual(_client(transport).complete(""), "ok")
        self.assertIn(("prompt", ""), transport.calls[0]["fields"])

    def test_successful_body_is_returned_verbatim(self):
        body = '{"choices": [{"text": "\\n\\nA subscription box for plants."}]}\n'
        for status in (200, 201, 299):
            with self.subTest(status=status):
                transport = _FakeTransport(TransportResponse(status_code=status, body=body))

                self.assertEqual(_client(transport).complete("idea"), body)

    def test_non_success_status_raises(self):
        for status in (199, 300, 401, 429, 500):
            with self.subTest(status=status):
                transport = _FakeTransport(
                    TransportResponse(status_code=status, body='{"error": "nope"}', reason="Bad")
                )

                with self.assertRaises(CompletionRequestError) as ctx:
                    _client(transport).complete("idea")

                message = str(ctx.exception)
                self.assertIn(f"Unexpected code {status}", message)
                self.assertIn("(Bad)", message)
                self.assertIn(API_URL, message)
                self.assertIn('{"error": "nope"}', message)

    def test_long_error_body_is_truncated_in_message(self):
        transport = _FakeTransport(TransportResponse(status_code=500, body="x" * 1000))

        with self.assertRaises(CompletionRequestError) as ctx:
            _client(transport).complete("idea")

        self.assertLess(len(str(ctx.exception)), 400)
        self.assertTrue(str(ctx.exception).endswith("..."))

    def test_empty_body_raises(self):
        transport = _FakeTransport(TransportResponse(status_code=200, body=""))

        with self.assertRaises(CompletionRequestError) as ctx:
            _client(transport).complete("idea")

        self.assertEqual(str(ctx.exception), "Response body is empty")

    def test_error_is_an_io_error(self):
        self.assertTrue(issubclass(CompletionRequestError, OSError))

    def test_client_is_reusable_after_failure(self):
        transport = _FakeTransport(
            CompletionRequestError("connection refused"),
            TransportResponse(status_code=200, body="second try"),
        )
        client = _client(transport)

        with self.assertRaises(CompletionRequestError):
            client.complete("idea")

        self.assertEqual(client.complete("idea"), "second try")
        self.assertEqual(len(transport.calls), 2)

    def test_timeout_is_forwarded(self):
        transport = _FakeTransport(TransportResponse(status_code=200, body="ok"))

        _client(transport, timeout_seconds=3.0).complete("idea")

        self.assertEqual(transport.calls[0]["timeout_seconds"], 3.0)

    def test_close_closes_transport(self):
        transport = _FakeTransport()

        _client(transport).close()

        self.assertTrue(transport.closed)

    def test_success_and_failure_are_logged_without_credential(self):
        transport = _FakeTransport(
            TransportResponse(status_code=200, body="hello"),
            TransportResponse(status_code=401, body=""),
        )
        client = _client(transport)

        with self.assertLogs("ideagpt.completion.client", level="INFO") as logs:
            client.complete("idea")
            with self.assertRaises(CompletionRequestError):
                client.complete("idea")

        self.assertTrue(any("completion_success" in line for line in logs.output), logs.output)
        self.assertTrue(any("body_chars=5" in line for line in logs.output), logs.output)
        self.assertTrue(any("completion_failed" in line for line in logs.output), logs.output)
        self.assertFalse(any("sk-secret" in line for line in logs.output), logs.output)


class BuildCompletionClientTests(unittest.TestCase):
    def test_uses_settings_values(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.properties"
            config_path.write_text(
                "OPENAI_API_KEY=sk-config\n"
                "OPENAI_API_URL=http://localhost:8080/v1/completions\n"
                "OPENAI_MODEL=test-model\n"
                "OPENAI_MAX_TOKENS=7\n"
                "OPENAI_TIMEOUT_SECONDS=2\n",
                encoding="utf-8",
            )
            settings = load_settings(config_path=config_path, environ={})

        transport = _FakeTransport(TransportResponse(status_code=200, body="ok"))
        client = build_completion_client(settings, transport=transport)
        client.complete("ping")

        call = transport.calls[0]
        self.assertEqual(call["url"], "http://localhost:8080/v1/completions")
        self.assertEqual(call["headers"]["Authorization"], "Bearer sk-config")
        self.assertEqual(
            call["fields"],
            [("model", "test-model"), ("prompt", "ping"), ("max_tokens", "7")],
        )
        self.assertEqual(call["timeout_seconds"], 2.0)

    def test_defaults_to_requests_transport(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.properties"
            config_path.write_text("OPENAI_API_KEY=sk-config\n", encoding="utf-8")
            settings = load_settings(config_path=config_path, environ={})

        client = build_completion_client(settings)
        self.addCleanup(client.close)

        self.assertIsInstance(client._transport, RequestsCompletionTransport)


if __name__ == "__main__":
    unittest.main()
