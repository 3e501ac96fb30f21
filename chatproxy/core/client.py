"""OpenAI client wrapper turning the message log into a single reply."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import openai
from openai import OpenAI  # type: ignore
from rich.console import Console

from ..utils import ASSISTANT_LABEL, Spinner, error_line
from .errors import AuthorizationError
from .messages import MessageLog
from .prompts import FILES_RECEIVED

DEFAULT_MODEL = "gpt-4o"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"

BACKED_OUT = "Backing out of transaction: {}"
UNAUTHORIZED = (
    "unauthorized. Please check your OPENAI_API_KEY env var or pass a token in explicitly"
)


@dataclass(frozen=True)
class ValidateOnly:
    """Completion option that only confirms the request is accepted.

    The response is capped at a single token and stopped on *acknowledgement*,
    which is returned in place of model output.
    """

    acknowledgement: str = FILES_RECEIVED

    def request_params(self) -> Dict[str, Any]:
        return {"max_tokens": 1, "stop": [self.acknowledgement]}


class OpenAIClientWrapper:
    """Thin wrapper around the OpenAI Python SDK hiding streaming details."""

    def __init__(
        self,
        client: OpenAI,
        *,
        output: Console,
        errors: Console,
        model: str = DEFAULT_MODEL,
        embedding_model: str = DEFAULT_EMBEDDING_MODEL,
        streaming: bool = False,
        fixed_response: Optional[str] = None,
    ):
        self.client = client
        self.output = output
        self.errors = errors
        self.model = model
        self.embedding_model = embedding_model
        self.streaming = streaming
        self.fixed_response = fixed_response

    # ------------------------------------------------------------------
    # Helper methods
    # ------------------------------------------------------------------

    def report(self, exc: BaseException) -> None:
        self.errors.print(error_line(str(exc)))

    def _collect(self, stream: Iterable[Any]) -> str:
        """Concatenate streamed tokens, echoing them when streaming is on."""
        accumulator: List[str] = []
        spinner = Spinner(self.output, prefix=f"{ASSISTANT_LABEL} ") if self.streaming else None
        first_token_received = False

        if spinner is not None:
            spinner.start()
        try:
            for chunk in stream:
                if not chunk.choices:
                    continue
                token = chunk.choices[0].delta.content
                if not token:
                    continue

                if spinner is not None:
                    if not first_token_received:
                        spinner.stop()
                        first_token_received = True
                    self.output.print(token, end="", markup=False)
                    self.output.file.flush()
                accumulator.append(token)
        finally:
            if spinner is not None:
                spinner.stop()
                self.output.print()  # new line after stream ends

        return "".join(accumulator)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def chat_completion(self, log: MessageLog, option: Optional[ValidateOnly] = None) -> str:
        """Submit the whole log and return the assistant's reply.

        A request rejected as too large is not an error: the last message is
        rolled back and a notice is returned in place of the reply. A rejected
        credential raises :class:`AuthorizationError`. Everything else
        propagates unchanged, including failures part-way through the stream.
        """
        if self.fixed_response:
            return self.fixed_response

        params: Dict[str, Any] = {
            "model": self.model,
            "messages": log.payload(),
            "stream": True,
        }
        if option is not None:
            params.update(option.request_params())

        try:
            stream = self.client.chat.completions.create(**params)  # type: ignore[arg-type]
        except openai.BadRequestError as e:
            self.report(e)
            log.rollback_last()
            return BACKED_OUT.format(e.message)
        except openai.AuthenticationError as e:
            self.report(e)
            raise AuthorizationError(UNAUTHORIZED) from e

        try:
            if option is not None:
                return option.acknowledgement
            return self._collect(stream)
        finally:
            close = getattr(stream, "close", None)
            if close is not None:
                close()

    def embed(self, texts: List[str]) -> List[List[float]]:
        """Return one embedding vector per text, in input order."""
        resp = self.client.embeddings.create(model=self.embedding_model, input=texts)
        data = sorted(resp.data, key=lambda item: item.index)
        return [[float(v) for v in item.embedding] for item in data]
