from __future__ import annotations

"""Conversion settings loader from environment variables."""

from dataclasses import dataclass
from pathlib import Path
import os


PROJECT_ROOT = Path(__file__).resolve().parents[2]

ERROR_POLICIES = ("isolate", "abort")


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean env var with a default."""
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.lower() in {"1", "true", "yes"}


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    """Read an env var restricted to a fixed set of values."""
    value = (os.getenv(name) or default).strip().lower()
    if value not in choices:
        raise ValueError(f"{name} must be one of {', '.join(choices)}; got '{value}'.")
    return value


def current_app_env() -> str:
    """Return the application environment name."""
    return os.getenv("APP_ENV") or os.getenv("ENV") or "dev"


def resolve_log_dir() -> Path:
    """Return SCORETIME_LOG_DIR, with relative values anchored at the project root."""
    log_dir = Path(os.getenv("SCORETIME_LOG_DIR") or "logs")
    if not log_dir.is_absolute():
        log_dir = (PROJECT_ROOT / log_dir).resolve()
    return log_dir


@dataclass(frozen=True)
class Settings:
    """Configuration values parsed from the environment."""
    project_root: Path
    log_dir: Path
    error_policy: str
    merge_chords: bool
    app_env: str

    @classmethod
    def from_env(cls) -> "Settings":
        """Construct settings from environment variables."""
        error_policy = _env_choice("SCORETIME_ERROR_POLICY", "isolate", ERROR_POLICIES)
        merge_chords = _env_bool("SCORETIME_MERGE_CHORDS", True)
        return cls(
            project_root=PROJECT_ROOT,
            log_dir=resolve_log_dir(),
            error_policy=error_policy,
            merge_chords=merge_chords,
            app_env=current_app_env(),
        )
