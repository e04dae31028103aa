"""Presentation layer.

Only the toolkit-independent presenter is exported here; import
``ideagpt.ui.window`` explicitly for the tkinter window.
"""

from ideagpt.ui.presenter import ERROR_PREFIX, PromptPresenter, format_error, is_submittable

__all__ = [
    "ERROR_PREFIX",
    "PromptPresenter",
    "format_error",
    "is_submittable",
]
