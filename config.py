"""
Application settings, read from the environment (or a local .env file).

get_settings() is cached so the whole process shares one Settings instance.
Route handlers receive it through Depends(get_settings) instead of reading
os.environ themselves.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True,
    )

    # Database
    database_url: str = Field(
        "mongodb://localhost:27017",
        validation_alias=AliasChoices("DATABASE_URL", "MONGODB_URI"),
    )
    database_name: str = "famsports"

    # Admin credentials (plaintext, compared as-is)
    admin_username: Optional[str] = None
    admin_password: Optional[str] = None

    # API
    cors_origins: List[str] = ["http://localhost:3000"]
    port: int = 5000

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def admin_configured(self) -> bool:
        return bool(self.admin_username) and bool(self.admin_password)


@lru_cache
def get_settings() -> Settings:
    return Settings()
