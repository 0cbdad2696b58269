"""Configuration from environment (SALAMI_* variables, no config file)."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from salami.files.hashing import DEFAULT_CHUNK_SIZE, resolve_algorithm

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class Settings(BaseSettings):
    """Hashing and logging settings from env."""

    model_config = SettingsConfigDict(env_prefix="SALAMI_", extra="ignore")

    # Hashing
    hash_algorithm: str = "SHA-256"
    hash_chunk_size: int = DEFAULT_CHUNK_SIZE

    # Logging (empty log_file = stderr only; level DEBUG|INFO|WARNING|ERROR)
    log_level: str = "INFO"
    log_file: str = ""

    @field_validator("hash_algorithm")
    @classmethod
    def _known_algorithm(cls, value: str) -> str:
        return resolve_algorithm(value)[1]

    @field_validator("hash_chunk_size")
    @classmethod
    def _positive_chunk_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("hash_chunk_size must be positive")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


def get_settings() -> Settings:
    """Return settings (re-read from the environment on every call)."""
    return Settings()
