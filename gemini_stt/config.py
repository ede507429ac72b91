"""Environment-driven settings for the transcription relay."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_PORT = 6021
DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_PROMPT = "Please transcribe this audio accurately."
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    api_key: str
    port: int = DEFAULT_PORT
    host: str = "0.0.0.0"
    model_name: str = DEFAULT_MODEL
    prompt: str = DEFAULT_PROMPT
    timeout_s: float = 60.0
    temp_dir: Path = Path("temp_audio")
    max_content_length: int = 50 * 1024 * 1024
    log_level: str = "INFO"


def _int(env, name, default):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _float(env, name, default):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the process environment.

    When ``environ`` is omitted a ``.env`` file in the working directory is
    loaded first (existing variables win) and ``os.environ`` is read.

    Raises:
        ConfigError: If GEMINI_API_KEY is missing or any value is invalid.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    api_key = environ.get("GEMINI_API_KEY", "").strip()
    if not api_key:
        raise ConfigError("GEMINI_API_KEY not found in environment variables.")

    port = _int(environ, "PORT", DEFAULT_PORT)
    if not 0 < port < 65536:
        raise ConfigError(f"PORT out of range: {port}")

    timeout_s = _float(environ, "TRANSCRIPTION_TIMEOUT", 60.0)
    if timeout_s <= 0:
        raise ConfigError("TRANSCRIPTION_TIMEOUT must be greater than zero")

    max_mb = _int(environ, "MAX_CONTENT_LENGTH_MB", 50)
    if max_mb <= 0:
        raise ConfigError("MAX_CONTENT_LENGTH_MB must be greater than zero")

    log_level = environ.get("LOG_LEVEL", "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"Invalid LOG_LEVEL. Choose from {sorted(LOG_LEVELS)}")

    return Settings(
        api_key=api_key,
        port=port,
        host=environ.get("HOST", "0.0.0.0"),
        model_name=environ.get("GEMINI_MODEL") or DEFAULT_MODEL,
        prompt=environ.get("TRANSCRIPTION_PROMPT") or DEFAULT_PROMPT,
        timeout_s=timeout_s,
        temp_dir=Path(environ.get("TEMP_AUDIO_DIR") or "temp_audio"),
        max_content_length=max_mb * 1024 * 1024,
        log_level=log_level,
    )
