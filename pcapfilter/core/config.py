"""
core/config.py

Application configuration via Pydantic Settings.
All values can be overridden with environment variables or a .env file.

Quick start — create a .env file in your project root:
    INTERFACE=wlan0
    TCPDUMP_BIN=/usr/sbin/tcpdump
    STRICT_VALIDATION=false
"""

from __future__ import annotations

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Expression builder
    STRICT_VALIDATION: bool = True
    ENFORCE_PORTRANGE_ORDER: bool = False

    # Command assembly
    TCPDUMP_BIN: str = "tcpdump"
    INTERFACE: str = "eth0"
    SNAPLEN: int = 0

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("SNAPLEN")
    @classmethod
    def check_snaplen(cls, v: int) -> int:
        if v < 0:
            raise ValueError("SNAPLEN must be >= 0")
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalise_log_level(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            if not isinstance(logging.getLevelName(v), int):
                raise ValueError(f"unknown log level {v!r}")
        return v


settings = Settings()
