from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_ENVIRONMENTS = {"development", "test", "production"}


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    DATA_DIR, DB_FILENAME, ADMIN_PASSWORD, ME_NAME, PARTNER_NAME).
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Basic app metadata
    app_name: str = "Household Split Tracker"
    debug: bool = True
    version: str = "0.1.0"
    environment: str = "development"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "fairshare.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    # The two household members
    me_name: str = "Me"
    partner_name: str = "Partner"

    # Auth (disabled while admin_password is unset)
    admin_username: str = "admin"
    admin_password: Optional[str] = None
    auth_cookie_max_age_seconds: int = 60 * 60 * 24 * 30

    # Listing sizes
    history_preview_size: int = 5
    closed_months_limit: int = 12
    archive_limit: int = 100

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def auth_enabled(self) -> bool:
        return bool(self.admin_password)

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        # Ensure persistence directory exists
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.environment = self.environment.strip().lower()
        if self.environment not in ALLOWED_ENVIRONMENTS:
            raise ValueError(
                f"Unsupported environment '{self.environment}'. Allowed: {ALLOWED_ENVIRONMENTS}"
            )


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
