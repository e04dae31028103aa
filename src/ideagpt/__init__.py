"""IdeaGpt: send a prompt to a text-completion API and show the raw reply."""

__version__ = "0.1.0"
