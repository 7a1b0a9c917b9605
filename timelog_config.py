"""Configuration management using pydantic-settings."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """CLI settings loaded from TIMELOG_* environment variables (or .env)."""

    log_level: str = "WARNING"

    # Default integer format for `encode` / `now`; --hex on the command line wins
    output_base: Literal["dec", "hex"] = "dec"
    # Print the signed Int64 container instead of the unsigned value
    signed_output: bool = False

    model_config = SettingsConfigDict(
        env_prefix="TIMELOG_",
        env_file=".env",
        case_sensitive=False,
    )
