# lockable/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LOCKABLE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    resources_file: str = Field(default="resources.yaml")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
