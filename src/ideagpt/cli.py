"""CLI for IdeaGpt."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence
import argparse
import json
import sys

from ideagpt import __version__
from ideagpt.completion.client import CompletionRequestError
from ideagpt.config.settings import (
    DEFAULT_CONFIG_PATH,
    StartupConfigurationError,
    load_settings,
    settings_summary,
)
from ideagpt.runtime.app import complete_once, run_desktop
from ideagpt.ui.presenter import format_error, is_submittable


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="IdeaGpt - send a prompt to a completion API")
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to the properties file. IDEAGPT_<KEY> environment variables override it.",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Validate settings and print a redacted summary.",
    )
    parser.add_argument(
        "--prompt",
        help="Send one prompt without opening the window and print the raw response.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"ideagpt {__version__}",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(config_path=args.config)
    except StartupConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    if args.check:
        print(json.dumps(settings_summary(settings), indent=2, sort_keys=True))
        return 0

    if args.prompt is not None:
        if not is_submittable(args.prompt):
            return 0
        try:
            print(complete_once(settings, args.prompt))
        except CompletionRequestError as exc:
            print(format_error(exc), file=sys.stderr)
            return 1
        return 0

    try:
        run_desktop(settings)
    except KeyboardInterrupt:
        return 130

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
