"""
Configuration from environment variables.
Loads .env from the repository root so settings are found regardless of cwd.
"""
import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# .env next to the repo root (parent of sheetsync/); load explicitly so it works from any cwd
_ROOT_DIR = Path(__file__).resolve().parent.parent
_ENV_FILE = _ROOT_DIR / ".env"

if _ENV_FILE.exists():
    from dotenv import load_dotenv
    load_dotenv(_ENV_FILE, override=False)
else:
    # Fallback: .env in the current working directory
    import os
    _cwd_env = Path(os.getcwd()) / ".env"
    if _cwd_env.exists():
        from dotenv import load_dotenv
        load_dotenv(_cwd_env, override=False)


class Settings(BaseSettings):
    """Load and validate config from env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Durable local snapshot (one record per key). sqlite keeps it next to the app.
    snapshot_database_url: str = "sqlite:///./sheetsync_snapshot.db"
    snapshot_key: str = "codolio-sheet-data"
    # Overrides the bundled sheetsync/data/default_sheet.json
    default_dataset_path: Path | None = None

    # Persistence backend for get_persistence(): "local" (in-process + snapshot) or "http"
    persistence_backend: str = "local"

    # In-process persistence service: simulated latency per call (ms). 0 disables.
    remote_delay_ms: int = 0

    # HTTP persistence client
    remote_base_url: str = "http://localhost:8000"
    remote_timeout_seconds: float = 10.0

    # CORS: comma-separated origins
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    log_level: str = "INFO"
    # DEBUG=true forces debug logging regardless of LOG_LEVEL
    debug: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        s = (v or "").strip().upper() if isinstance(v, str) else ""
        return s if s in _VALID_LOG_LEVELS else "INFO"

    @property
    def log_level_number(self) -> int:
        if self.debug:
            return logging.DEBUG
        return getattr(logging, self.log_level, logging.INFO)


settings = Settings()
