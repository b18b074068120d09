"""
Runtime settings read from the environment.

A `.env` file in the working directory is loaded first; variables that are
already set in the process environment win over it.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

DEFAULT_API_BASE = "http://localhost:3000"
DEFAULT_TIMEOUT = 15
# Large enough to stand for "the whole collection"
DEFAULT_CANDIDATES_PAGE_SIZE = 2000
DEFAULT_JOBS_PAGE_SIZE = 1000
DEFAULT_MAX_RETRIES = 3
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    api_base: str = DEFAULT_API_BASE
    timeout: int = DEFAULT_TIMEOUT
    candidates_page_size: int = DEFAULT_CANDIDATES_PAGE_SIZE
    jobs_page_size: int = DEFAULT_JOBS_PAGE_SIZE
    max_retries: int = DEFAULT_MAX_RETRIES
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    # Names of variables that were set but unusable
    invalid: Tuple[str, ...] = ()


def load_env(env_path: Optional[Path] = None) -> None:
    """Load .env from the working directory if present."""
    env_path = env_path or Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)


def _read_env(*keys, default=None):
    """Return the first environment variable found among keys."""
    for key in keys:
        if key in os.environ:
            return os.environ[key]
    return default


def _read_int(key: str, default: int, invalid: list, minimum: int = 1) -> int:
    raw = _read_env(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        invalid.append(key)
        return default
    if value < minimum:
        invalid.append(key)
        return default
    return value


def _read_level(invalid: list) -> str:
    level = _read_env("TALENTVIEW_LOG_LEVEL", default="INFO").strip().upper()
    if level not in LOG_LEVELS:
        invalid.append("TALENTVIEW_LOG_LEVEL")
        return "INFO"
    return level


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """
    Build Settings from the environment.

    Malformed values fall back to their defaults; their names are kept in
    Settings.invalid so the caller can report them once logging is set up.
    """
    load_env(env_path)
    invalid: list = []

    return Settings(
        api_base=_read_env("TALENTVIEW_API_BASE", default=DEFAULT_API_BASE).rstrip("/"),
        timeout=_read_int("TALENTVIEW_TIMEOUT", DEFAULT_TIMEOUT, invalid),
        candidates_page_size=_read_int(
            "TALENTVIEW_CANDIDATES_PAGE_SIZE", DEFAULT_CANDIDATES_PAGE_SIZE, invalid
        ),
        jobs_page_size=_read_int("TALENTVIEW_JOBS_PAGE_SIZE", DEFAULT_JOBS_PAGE_SIZE, invalid),
        max_retries=_read_int("TALENTVIEW_MAX_RETRIES", DEFAULT_MAX_RETRIES, invalid, minimum=0),
        log_level=_read_level(invalid),
        log_dir=Path(_read_env("TALENTVIEW_LOG_DIR", default="logs")),
        invalid=tuple(invalid),
    )
