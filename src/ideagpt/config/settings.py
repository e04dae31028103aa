"""Typed settings loader for IdeaGpt."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Tuple
import math
import os

from ideagpt.config.properties import PropertiesError, load_properties


DEFAULT_CONFIG_PATH = Path("config.properties")
DEFAULT_ENDPOINT = "https://api.openai.com/v1/completions"
DEFAULT_MODEL = "gpt-4"
DEFAULT_MAX_TOKENS = 100
DEFAULT_WINDOW_TITLE = "IdeaGpt - Powered by GPT"
ENV_PREFIX = "IDEAGPT_"

_MISSING = object()
_VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


class StartupConfigurationError(ValueError):
    """Raised when settings cannot be loaded or validated at startup."""


@dataclass(frozen=True)
class ApiSettings:
    api_key: str = field(repr=False)
    endpoint: str = DEFAULT_ENDPOINT
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        api_key = self.api_key.strip()
        if not api_key:
            raise StartupConfigurationError("OPENAI_API_KEY cannot be empty.")

        if not api_key.isascii():
            raise StartupConfigurationError("OPENAI_API_KEY must contain only ASCII characters.")

        endpoint = self.endpoint.strip()
        if not endpoint.startswith(("http://", "https://")):
            raise StartupConfigurationError("OPENAI_API_URL must be an http(s) URL.")

        model = self.model.strip()
        if not model:
            raise StartupConfigurationError("OPENAI_MODEL cannot be empty.")

        if self.max_tokens <= 0:
            raise StartupConfigurationError("OPENAI_MAX_TOKENS must be > 0.")

        if self.timeout_seconds is not None and not (
            math.isfinite(self.timeout_seconds) and self.timeout_seconds > 0
        ):
            raise StartupConfigurationError("OPENAI_TIMEOUT_SECONDS must be a finite number > 0.")

        object.__setattr__(self, "api_key", api_key)
        object.__setattr__(self, "endpoint", endpoint)
        object.__setattr__(self, "model", model)


@dataclass(frozen=True)
class UiSettings:
    title: str = DEFAULT_WINDOW_TITLE
    width: int = 400
    height: int = 300
    background_requests: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise StartupConfigurationError("UI_WINDOW_WIDTH and UI_WINDOW_HEIGHT must be > 0.")

        object.__setattr__(self, "title", self.title.strip())


@dataclass(frozen=True)
class RuntimeSettings:
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        log_level = self.log_level.strip().upper()
        if log_level not in _VALID_LOG_LEVELS:
            raise StartupConfigurationError(
                "LOG_LEVEL must be one of: " + ", ".join(sorted(_VALID_LOG_LEVELS))
            )

        object.__setattr__(self, "log_level", log_level)


@dataclass(frozen=True)
class AppSettings:
    api: ApiSettings
    ui: UiSettings
    runtime: RuntimeSettings
    source_path: Path


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppSettings:
    """Load validated settings from a properties file and environment overrides.

    The file is mandatory even when every value is supplied through the
    environment; a missing or unreadable file aborts startup.
    """

    env = dict(environ) if environ is not None else dict(os.environ)
    path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
    properties = _load_config(path)

    api = ApiSettings(
        api_key=_read_value(properties, env, key="OPENAI_API_KEY", caster=_as_str),
        endpoint=_read_value(
            properties,
            env,
            key="OPENAI_API_URL",
            caster=_as_str,
            default=DEFAULT_ENDPOINT,
        ),
        model=_read_value(
            properties,
            env,
            key="OPENAI_MODEL",
            caster=_as_str,
            default=DEFAULT_MODEL,
        ),
        max_tokens=_read_value(
            properties,
            env,
            key="OPENAI_MAX_TOKENS",
            caster=_as_int,
            default=DEFAULT_MAX_TOKENS,
        ),
        timeout_seconds=_read_value(
            properties,
            env,
            key="OPENAI_TIMEOUT_SECONDS",
            caster=_as_optional_float,
            default=None,
        ),
    )

    ui = UiSettings(
        title=_read_value(
            properties,
            env,
            key="UI_WINDOW_TITLE",
            caster=_as_str,
            default=DEFAULT_WINDOW_TITLE,
        ),
        width=_read_value(properties, env, key="UI_WINDOW_WIDTH", caster=_as_int, default=400),
        height=_read_value(properties, env, key="UI_WINDOW_HEIGHT", caster=_as_int, default=300),
        background_requests=_read_value(
            properties,
            env,
            key="UI_BACKGROUND_REQUESTS",
            caster=_as_bool,
            default=False,
        ),
    )

    runtime = RuntimeSettings(
        log_level=_read_value(properties, env, key="LOG_LEVEL", caster=_as_str, default="INFO"),
    )

    return AppSettings(api=api, ui=ui, runtime=runtime, source_path=path)


def settings_summary(settings: AppSettings) -> dict:
    """Render redacted settings for diagnostics."""

    return {
        "source_path": str(settings.source_path),
        "api": {
            "api_key": _redact(settings.api.api_key),
            "endpoint": settings.api.endpoint,
            "model": settings.api.model,
            "max_tokens": settings.api.max_tokens,
            "timeout_seconds": settings.api.timeout_seconds,
        },
        "ui": {
            "title": settings.ui.title,
            "width": settings.ui.width,
            "height": settings.ui.height,
            "background_requests": settings.ui.background_requests,
        },
        "runtime": {
            "log_level": settings.runtime.log_level,
        },
    }


def _redact(secret: str) -> str:
    if len(secret) <= 8:
        return "***"
    return f"{secret[:3]}...{secret[-4:]}"


def _load_config(path: Path) -> Mapping[str, str]:
    if not path.is_file():
        raise StartupConfigurationError(f"Config file does not exist: {path}")

    try:
        return load_properties(path)
    except OSError as exc:
        raise StartupConfigurationError(f"Config file could not be read: {path}") from exc
    except UnicodeDecodeError as exc:
        raise StartupConfigurationError(f"Config file is not valid UTF-8: {path}") from exc
    except PropertiesError as exc:
        raise StartupConfigurationError(f"Config file is malformed: {path}: {exc}") from exc


def _read_value(
    properties: Mapping[str, str],
    environ: Mapping[str, str],
    *,
    key: str,
    caster: Callable[[str], Any],
    default: Any = _MISSING,
) -> Any:
    raw_value, source = _resolve_raw_value(
        properties=properties,
        environ=environ,
        key=key,
        default=default,
    )
    # Defaults are already typed; only file and environment text is cast.
    if source == "default":
        return raw_value

    try:
        return caster(raw_value)
    except ValueError as exc:
        raise StartupConfigurationError(
            f"Invalid value for {key} from {source}: {raw_value!r} ({exc})"
        ) from exc


def _resolve_raw_value(
    *,
    properties: Mapping[str, str],
    environ: Mapping[str, str],
    key: str,
    default: Any,
) -> Tuple[Any, str]:
    env_key = ENV_PREFIX + key
    env_value = environ.get(env_key)
    if env_value not in (None, ""):
        return env_value, "environment"

    if key in properties:
        return properties[key], "config"

    if default is not _MISSING:
        return default, "default"

    raise StartupConfigurationError(
        f"Missing required setting '{key}'. Provide it in the config file or via '{env_key}'."
    )


def _as_str(text: str) -> str:
    stripped = text.strip()
    if not stripped:
        raise ValueError("value cannot be empty")
    return stripped


def _as_int(text: str) -> int:
    return int(text.strip())


def _as_optional_float(text: str) -> Optional[float]:
    stripped = text.strip()
    return float(stripped) if stripped else None


def _as_bool(text: str) -> bool:
    normalized = text.strip().lower()
    if normalized in _TRUE_WORDS:
        return True
    if normalized in _FALSE_WORDS:
        return False
    raise ValueError("expected one of " + ", ".join(sorted(_TRUE_WORDS | _FALSE_WORDS)))
