"""Runtime settings for the debug sink server."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_PORT = 3001


class Settings(BaseSettings):
    """Server settings read from the environment.

    Variables are unprefixed so the server honours the conventional
    ``PORT`` override used by hosting platforms.
    """

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Listening port")
    host: str = Field(default="0.0.0.0", description="Bind address")
    log_level: LogLevel = Field(default="INFO", description="Logging level")

    @field_validator("log_level", mode="before")
    @classmethod
    def _uppercase_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()
