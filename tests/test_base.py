import io
import unittest
from unittest.mock import Mock

import httpx

from chatproxy import new_session

API_URL = "https://api.openai.com/v1/chat/completions"


def chunk(content):
    """A streamed chat completion chunk carrying *content*."""
    return Mock(choices=[Mock(delta=Mock(content=content))])


class FakeStream:
    """Iterable stand-in for ``openai.Stream`` that records being closed."""

    def __init__(self, tokens, error=None):
        self.tokens = list(tokens)
        self.error = error
        self.closed = False

    def __iter__(self):
        for token in self.tokens:
            yield chunk(token)
        if self.error is not None:
            raise self.error

    def close(self):
        self.closed = True


def status_error(cls, status, message):
    """Build an ``openai.APIStatusError`` subclass as the SDK would raise it."""
    request = httpx.Request("POST", API_URL)
    response = httpx.Response(status, request=request)
    return cls(message, response=response, body=None)


def api_request():
    return httpx.Request("POST", API_URL)


class BaseChatProxyTest(unittest.TestCase):
    def setUp(self):
        # Capture every stream the session talks through
        self.output = io.StringIO()
        self.errors = io.StringIO()
        self.transcript = io.StringIO()

        # Mock the OpenAI client
        self.mock_client = Mock()

        self.session = self.make_session()

    def make_session(self, input_text="", **options):
        return new_session(
            credential="test-key",
            client=self.mock_client,
            input=io.StringIO(input_text),
            output=self.output,
            error_output=self.errors,
            transcript=self.transcript,
            **options,
        )

    def stream_reply(self, *tokens):
        stream = FakeStream(tokens)
        self.mock_client.chat.completions.create.return_value = stream
        return stream
