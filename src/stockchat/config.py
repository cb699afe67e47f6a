"""Runtime configuration read from the environment.

Hidden design decisions:
- Variable names and defaults
- Parsing of booleans and numbers from strings
"""

import os
from collections.abc import Mapping
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "STOCKCHAT_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Settings(BaseModel):
    """Validated stockchat settings.

    Environment variables (all prefixed with STOCKCHAT_):
        AGENT_URL: Agent server base URL (default: http://localhost:3000)
        API_KEY: Optional key sent as X-API-Key
        SHEET_ID: Published inventory sheet id
        SHEET_GID: Sheet tab id (default: 0)
        REQUEST_TIMEOUT: Ceiling for one chat request in seconds (default: 60)
        HEALTH_TIMEOUT: Liveness probe timeout in seconds (default: 10)
        STREAMING: Use the streamed query endpoint (default: true)
        MEMORY_BACKEND: memory or sqlite (default: memory)
        MEMORY_PATH: SQLite file for the sqlite backend
        MAX_TOKENS: Optional generation limit
        LOG_LEVEL: debug, info, warning or error (default: info)
    """

    agent_url: str = "http://localhost:3000"
    api_key: str | None = None
    sheet_id: str | None = None
    sheet_gid: int = Field(default=0, ge=0)
    request_timeout: float = Field(default=60.0, gt=0)
    health_timeout: float = Field(default=10.0, gt=0)
    streaming: bool = True
    memory_backend: Literal["memory", "sqlite"] = "memory"
    memory_path: str = "./stockchat_session.db"
    max_tokens: int | None = Field(default=None, ge=1)
    log_level: Literal["debug", "info", "warning", "error"] = "info"

    @field_validator("agent_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("agent_url must start with http:// or https://")
        return value

    @field_validator("api_key", "sheet_id", "max_tokens", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("streaming", mode="before")
    @classmethod
    def _parse_bool(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
        return value

    @field_validator("memory_backend", "log_level", mode="before")
    @classmethod
    def _lowercase(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, dotenv: bool = True) -> "Settings":
        """Build settings from STOCKCHAT_* variables.

        Args:
            environ: Mapping to read instead of os.environ
            dotenv: Load a .env file first (ignored when environ is given)

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw
        return cls(**values)

    @property
    def sheet_configured(self) -> bool:
        return bool(self.sheet_id)
