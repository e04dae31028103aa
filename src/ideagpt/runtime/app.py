"""Runtime wiring for IdeaGpt."""

from __future__ import annotations

from typing import Any, Callable, Optional
import logging

from ideagpt.completion.client import CompletionTransport, build_completion_client
from ideagpt.config.settings import AppSettings
from ideagpt.ui.presenter import PromptPresenter


def configure_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def run_desktop(
    settings: AppSettings,
    *,
    transport: Optional[CompletionTransport] = None,
    root_factory: Optional[Callable[[], Any]] = None,
) -> None:
    """Open the prompt window and block until it is closed."""

    import tkinter as tk

    from ideagpt.ui.window import IdeaGptWindow

    configure_logging(settings.runtime.log_level)
    logger = logging.getLogger("ideagpt.runtime")

    client = build_completion_client(settings, transport=transport)
    try:
        root = (root_factory or tk.Tk)()
        IdeaGptWindow(root, PromptPresenter(client), settings.ui)
        logger.info(
            "Window opened (model=%s, endpoint=%s, background_requests=%s).",
            settings.api.model,
            settings.api.endpoint,
            settings.ui.background_requests,
        )
        root.mainloop()
    finally:
        logger.info("Window closed.")
        client.close()


def complete_once(
    settings: AppSettings,
    prompt: str,
    *,
    transport: Optional[CompletionTransport] = None,
) -> str:
    """Send a single prompt without a window; raises ``CompletionRequestError``."""

    configure_logging(settings.runtime.log_level)
    client = build_completion_client(settings, transport=transport)
    try:
        return client.complete(prompt)
    finally:
        client.close()
