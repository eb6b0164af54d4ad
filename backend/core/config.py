from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    # Validation
    VALIDATION_MODE: str = "collect_all"  # fail_fast | collect_all
    MAX_VALIDATION_ERRORS: int | None = None  # cap for collect_all mode; None keeps every error

    # Coercion
    DEFAULT_ENCODING: str = "utf-8"  # Used to decode raw byte payloads

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
