from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Renewal Deadline Engine", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    admin_token: str | None = Field(default=None, alias="ADMIN_TOKEN")
    deadline_config_path: str | None = Field(default=None, alias="DEADLINE_CONFIG_PATH")
    renewal_grace_days: int = Field(default=30, alias="RENEWAL_GRACE_DAYS")
    max_preview_students: int = Field(default=10, alias="MAX_PREVIEW_STUDENTS")
    renewal_base_fee: int = Field(default=0, alias="RENEWAL_BASE_FEE")


@lru_cache
def get_settings() -> Settings:
    return Settings()
