"""Runtime configuration for the posts API.

Values come from process environment first, then ``.env`` at the repo
root, then the defaults below.  Storage is SQLite under ``data/`` unless
``APP_DATABASE_URL`` points at a server database.
"""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_DEFAULT_DB_PATH = str(_PROJECT_ROOT / "data" / "posts.db")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_host: str = "127.0.0.1"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # APP_DATABASE_URL wins over APP_DB_PATH when both are set
    app_db_path: str = _DEFAULT_DB_PATH
    database_url_override: str | None = Field(
        default=None, validation_alias="APP_DATABASE_URL",
    )

    @property
    def database_url(self) -> str:
        """Connection URL: ``APP_DATABASE_URL`` if set, else SQLite at ``app_db_path``."""
        if self.database_url_override:
            return self.database_url_override
        return f"sqlite:///{self.app_db_path}"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @model_validator(mode="after")
    def _validate_db_path(self) -> "Settings":
        """Create the SQLite directory up front so the first write cannot fail on it."""
        if not self.is_sqlite:
            return self
        parent = Path(self.app_db_path).parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = (
                f"Cannot create database directory '{parent}': {exc}. "
                f"Set APP_DB_PATH to a writable location."
            )
            raise ValueError(msg) from exc
        return self

    def safe_dump(self) -> dict[str, object]:
        """Return settings dict without credentials, safe for logging."""
        return {
            "api_host": self.api_host,
            "api_port": self.api_port,
            "debug": self.debug,
            "log_level": self.log_level,
            "app_db_path": self.app_db_path,
            "database_backend": self.database_url.split(":", 1)[0],
        }


settings = Settings()
