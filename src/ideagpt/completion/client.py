"""Text-completion client and its HTTP transport."""

from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence
import logging

import requests

from ideagpt.completion.types import CompletionRequest, TransportResponse
from ideagpt.config.settings import AppSettings


_BODY_EXCERPT_CHARS = 200


class CompletionRequestError(OSError):
    """Raised for any failed completion call: bad status, empty body or transport failure."""


class CompletionTransport(Protocol):
    def post_form(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        fields: Sequence[tuple[str, str]],
        timeout_seconds: Optional[float],
    ) -> TransportResponse:
        ...

    def close(self) -> None:
        ...


class RequestsCompletionTransport:
    """Form-encoded POST over a single pooled ``requests.Session``."""

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self._session = session or requests.Session()

    def post_form(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        fields: Sequence[tuple[str, str]],
        timeout_seconds: Optional[float],
    ) -> TransportResponse:
        try:
            with self._session.post(
                url,
                headers=dict(headers),
                data=list(fields),
                timeout=timeout_seconds,
            ) as response:
                return TransportResponse(
                    status_code=response.status_code,
                    body=response.text,
                    reason=response.reason or "",
                )
        except (requests.RequestException, ValueError) as exc:
            # Header encoding and timeout validation errors surface as bare ValueError.
            raise CompletionRequestError(f"Request to {url} failed: {exc}") from exc

    def close(self) -> None:
        self._session.close()


class CompletionClient:
    """Synchronous completions API adapter returning the raw response body."""

    def __init__(
        self,
        *,
        api_key: str,
        endpoint: str,
        model: str,
        max_tokens: int,
        transport: CompletionTransport,
        timeout_seconds: Optional[float] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._api_key = api_key
        self._endpoint = endpoint
        self._model = model
        self._max_tokens = max_tokens
        self._transport = transport
        self._timeout_seconds = timeout_seconds
        self._logger = logger or logging.getLogger("ideagpt.completion.client")

    def complete(self, prompt: str) -> str:
        request = CompletionRequest(model=self._model, prompt=prompt, max_tokens=self._max_tokens)

        try:
            response = self._transport.post_form(
                self._endpoint,
                headers={"Authorization": f"Bearer {self._api_key}"},
                fields=request.form_fields(),
                timeout_seconds=self._timeout_seconds,
            )
            body = self._check_response(response)
        except CompletionRequestError as exc:
            self._logger.warning(
                "completion_failed model=%s error=%s",
                self._model,
                exc,
            )
            raise

        self._logger.info(
            "completion_success model=%s status=%s body_chars=%s",
            self._model,
            response.status_code,
            len(body),
        )
        return body

    def close(self) -> None:
        self._transport.close()

    def _check_response(self, response: TransportResponse) -> str:
        if not response.is_successful:
            raise CompletionRequestError(_unexpected_status_message(self._endpoint, response))
        if not response.body:
            raise CompletionRequestError("Response body is empty")
        return response.body


def build_completion_client(
    settings: AppSettings,
    *,
    transport: Optional[CompletionTransport] = None,
    logger: logging.Logger | None = None,
) -> CompletionClient:
    return CompletionClient(
        api_key=settings.api.api_key,
        endpoint=settings.api.endpoint,
        model=settings.api.model,
        max_tokens=settings.api.max_tokens,
        timeout_seconds=settings.api.timeout_seconds,
        transport=transport or RequestsCompletionTransport(),
        logger=logger,
    )


def _unexpected_status_message(url: str, response: TransportResponse) -> str:
    message = f"Unexpected code {response.status_code}"
    if response.reason:
        message += f" ({response.reason})"
    message += f" for {url}"

    excerpt = response.body.strip()
    if excerpt:
        if len(excerpt) > _BODY_EXCERPT_CHARS:
            excerpt = excerpt[:_BODY_EXCERPT_CHARS] + "..."
        message += f": {excerpt}"
    return message
