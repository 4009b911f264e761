from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_QUEUE_SIZE = 100
DEFAULT_TIMEOUT_S = 10.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    webhook_url: str = Field(default="", alias="SLACK_WEBHOOK_URL")
    queue_size: int = Field(default=DEFAULT_QUEUE_SIZE, ge=1, alias="SLACKSENDER_QUEUE_SIZE")
    timeout_s: float = Field(default=DEFAULT_TIMEOUT_S, gt=0, alias="SLACKSENDER_TIMEOUT_S")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
