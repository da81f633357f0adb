"""
Settings Module

Runtime configuration for the expense splitter, read from environment
variables.

Environment:
    SPLITTER_CURRENCY_SYMBOL: Symbol used when formatting money (default: $).
    SPLITTER_RESIDUE_POLICY: "payer" or "distribute" (default: payer).
    SPLITTER_LOG_LEVEL: Root log level name (default: INFO).
    SPLITTER_HOST: Bind host for the API server (default: 127.0.0.1).
    SPLITTER_PORT: Bind port for the API server (default: 8000).

Functions:
    get_settings: Return the cached Settings instance.
    configure_logging: Configure the root logger once.
"""

import logging
import os
from functools import lru_cache

from pydantic import BaseModel, Field, field_validator

from expenses import ResiduePolicy


ENV_PREFIX = "SPLITTER_"


class Settings(BaseModel):
    """Validated application settings."""
    currency_symbol: str = Field("$", min_length=1)
    residue_policy: ResiduePolicy = ResiduePolicy.PAYER
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = Field(8000, gt=0, lt=65536)

    @field_validator("residue_policy", mode="before")
    @classmethod
    def _lowercase_policy(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value}")
        return value

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Build settings from SPLITTER_* variables, ignoring unset ones."""
        environ = os.environ if environ is None else environ
        values = {}
        for field_name in cls.model_fields:
            key = ENV_PREFIX + field_name.upper()
            if key in environ:
                values[field_name] = environ[key]
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(level: str = None) -> None:
    """Configure root logging with the configured level; later calls are no-ops."""
    logging.basicConfig(
        level=level or get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
