"""Toolkit-independent presentation logic for the prompt window."""

from __future__ import annotations

from typing import Optional, Protocol
import logging

from ideagpt.completion.client import CompletionRequestError


ERROR_PREFIX = "Error: "


class CompletionCaller(Protocol):
    def complete(self, prompt: str) -> str:
        ...


def is_submittable(prompt: str) -> bool:
    # Only the empty string is rejected; whitespace is sent as typed.
    return prompt != ""


def format_error(exc: BaseException) -> str:
    return f"{ERROR_PREFIX}{exc}"


class PromptPresenter:
    """Turns a submitted prompt into the text shown in the output area."""

    def __init__(self, client: CompletionCaller, logger: Optional[logging.Logger] = None) -> None:
        self._client = client
        self._logger = logger or logging.getLogger("ideagpt.ui")

    def submit(self, prompt: str) -> Optional[str]:
        """Return the text to display, or ``None`` when nothing was sent."""

        if not is_submittable(prompt):
            self._logger.debug("prompt_skipped reason=empty")
            return None

        try:
            return self._client.complete(prompt)
        except CompletionRequestError as exc:
            return format_error(exc)
