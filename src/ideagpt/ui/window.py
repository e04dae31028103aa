"""Tkinter prompt window."""

from __future__ import annotations

from typing import Optional
import logging
import queue
import threading
import tkinter as tk
from tkinter import scrolledtext

from ideagpt.config.settings import UiSettings
from ideagpt.ui.presenter import PromptPresenter, format_error, is_submittable


POLL_INTERVAL_MS = 100
PROMPT_LABEL = "Enter your prompt:"
SUBMIT_LABEL = "Send to GPT"


class IdeaGptWindow:
    """Prompt input, submit button and read-only response area.

    By default the completion call runs on the Tk event thread and the window
    is unresponsive until it returns. With ``background_requests`` enabled the
    call runs on a worker thread and its result is handed back through a queue
    polled from the event loop; the button stays disabled meanwhile so only one
    request is in flight.
    """

    def __init__(
        self,
        root: tk.Tk,
        presenter: PromptPresenter,
        settings: UiSettings,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._root = root
        self._presenter = presenter
        self._background = settings.background_requests
        self._logger = logger or logging.getLogger("ideagpt.ui")
        self._results: "queue.Queue[Optional[str]]" = queue.Queue()

        root.title(settings.title)
        root.geometry(f"{settings.width}x{settings.height}")

        panel = tk.Frame(root)
        panel.pack(side=tk.TOP, fill=tk.X)

        tk.Label(panel, text=PROMPT_LABEL).pack(side=tk.TOP, anchor=tk.W)
        self.prompt_text = scrolledtext.ScrolledText(panel, height=5, width=30, wrap=tk.WORD)
        self.prompt_text.pack(side=tk.TOP, fill=tk.X)
        self.submit_button = tk.Button(panel, text=SUBMIT_LABEL, command=self.on_submit)
        self.submit_button.pack(side=tk.TOP, fill=tk.X)

        self.response_text = scrolledtext.ScrolledText(
            root, height=10, width=30, wrap=tk.WORD, state=tk.DISABLED
        )
        self.response_text.pack(side=tk.TOP, expand=True, fill=tk.BOTH)

    def on_submit(self) -> None:
        prompt = self.prompt_text.get("1.0", "end-1c")
        if not is_submittable(prompt):
            return

        if self._background:
            self._submit_in_background(prompt)
            return

        self._show_result(self._presenter.submit(prompt))

    def show_response(self, text: str) -> None:
        self.response_text.config(state=tk.NORMAL)
        self.response_text.delete("1.0", tk.END)
        self.response_text.insert("1.0", text)
        self.response_text.config(state=tk.DISABLED)

    def response(self) -> str:
        return self.response_text.get("1.0", "end-1c")

    def _show_result(self, result: Optional[str]) -> None:
        if result is not None:
            self.show_response(result)

    def _submit_in_background(self, prompt: str) -> None:
        self.submit_button.config(state=tk.DISABLED)
        worker = threading.Thread(
            target=self._run_submission,
            args=(prompt,),
            name="ideagpt-completion",
            daemon=True,
        )
        worker.start()
        self._root.after(POLL_INTERVAL_MS, self._poll_result)

    def _run_submission(self, prompt: str) -> None:
        try:
            self._results.put(self._presenter.submit(prompt))
        except Exception as exc:
            self._logger.exception("Background completion failed.")
            self._results.put(format_error(exc))

    def _poll_result(self) -> None:
        try:
            result = self._results.get_nowait()
        except queue.Empty:
            self._root.after(POLL_INTERVAL_MS, self._poll_result)
            return

        self.submit_button.config(state=tk.NORMAL)
        self._show_result(result)
