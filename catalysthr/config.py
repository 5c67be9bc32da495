"""
Configuration for the catalysthr CLI.

Settings come from environment variables (optionally loaded from .env by
env.load_env). The scorer and the pipeline engine never read configuration;
the CLI builds their collaborators from it.
"""

import os
from pathlib import Path
from typing import List, Optional

DEFAULT_STORE = "data/store.json"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


class Config:
    """Typed view of the CATALYST_* environment variables."""

    def __init__(self):
        self._load_env_config()

    def _load_env_config(self):
        # Record store (.db/.sqlite selects SQLite)
        self.store_path = Path(os.getenv("CATALYST_STORE", DEFAULT_STORE) or DEFAULT_STORE)
        self.db_retries = _env_int("CATALYST_DB_RETRIES", 0)

        # Logging
        self.log_level = os.getenv("CATALYST_LOG_LEVEL", "INFO").upper()
        self.log_dir = Path(os.getenv("CATALYST_LOG_DIR", "logs") or "logs")
        self.log_to_file = _env_bool("CATALYST_LOG_TO_FILE", "true")

        # Pipeline / matching defaults
        self.note_author = os.getenv("CATALYST_NOTE_AUTHOR", "HR").strip() or "HR"
        self.rank_limit = _env_int("CATALYST_RANK_LIMIT", 10)

    def validate(self) -> List[str]:
        """
        Validate configuration values

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"CATALYST_LOG_LEVEL must be a logging level name, got {self.log_level}")
        if self.db_retries < 0:
            errors.append("CATALYST_DB_RETRIES must be >= 0")
        if self.rank_limit < 1:
            errors.append("CATALYST_RANK_LIMIT must be >= 1")
        return errors


_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the process-wide Config."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Re-read the environment (tests, or after load_env)."""
    global _config
    _config = Config()
    return _config
