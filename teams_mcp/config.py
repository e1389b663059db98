"""
Settings loaded from the environment (and an optional ``.env`` file).
"""

import os
from pathlib import Path
from typing import List, Literal, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError

DEFAULT_GRAPH_URL = "https://graph.microsoft.com/v1.0"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Runtime configuration for both API variants."""

    api_mode: Literal["bot", "graph"] = "bot"

    # bot identity (Bot Connector)
    app_id: Optional[str] = None
    app_password: Optional[str] = None
    tenant_id: Optional[str] = None
    service_url: Optional[str] = None
    conversation_id: Optional[str] = None
    thread_id: Optional[str] = None

    # delegated user (Graph)
    access_token: Optional[str] = None
    graph_url: str = DEFAULT_GRAPH_URL

    http_timeout: float = Field(default=30.0, gt=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return v

    def require_bot(self) -> "Settings":
        self._require({
            "TEAMS_APP_ID": self.app_id,
            "TEAMS_APP_PASSWORD": self.app_password,
            "TEAMS_SERVICE_URL": self.service_url,
            "TEAMS_CONVERSATION_ID": self.conversation_id,
        })
        return self

    def require_graph(self) -> "Settings":
        self._require({"TEAMS_ACCESS_TOKEN": self.access_token})
        return self

    def require_mode(self) -> "Settings":
        if self.api_mode == "graph":
            return self.require_graph()
        return self.require_bot()

    @staticmethod
    def _require(values: Mapping[str, Optional[str]]) -> None:
        missing: List[str] = [k for k, v in values.items() if not v]
        if missing:
            raise ConfigurationError(
                f"{', '.join(missing)} not set. Set it in your environment "
                f"or .env file.")


_ENV_MAP = {
    "api_mode": "TEAMS_API_MODE",
    "app_id": "TEAMS_APP_ID",
    "app_password": "TEAMS_APP_PASSWORD",
    "tenant_id": "TEAMS_TENANT_ID",
    "service_url": "TEAMS_SERVICE_URL",
    "conversation_id": "TEAMS_CONVERSATION_ID",
    "thread_id": "TEAMS_THREAD_ID",
    "access_token": "TEAMS_ACCESS_TOKEN",
    "graph_url": "TEAMS_GRAPH_URL",
    "http_timeout": "TEAMS_HTTP_TIMEOUT",
    "log_level": "TEAMS_LOG_LEVEL",
}


def load_env_file() -> None:
    """Load ``.env`` (or ``$TEAMS_MCP_ENV_FILE``) without overriding the
    real environment."""
    env_path = os.environ.get("TEAMS_MCP_ENV_FILE", "").strip()
    path = Path(env_path).expanduser() if env_path else Path.cwd() / ".env"
    load_dotenv(path, override=False)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build ``Settings`` from *environ* (default: ``os.environ``).

    Empty variables count as unset.
    """
    if environ is None:
        load_env_file()
        environ = os.environ

    values = {}
    for field, var in _ENV_MAP.items():
        raw = environ.get(var, "").strip()
        if raw:
            values[field] = raw
    if "api_mode" in values:
        values["api_mode"] = values["api_mode"].lower()
    if "service_url" in values:
        values["service_url"] = values["service_url"].rstrip("/")
    if "graph_url" in values:
        values["graph_url"] = values["graph_url"].rstrip("/")

    try:
        return Settings(**values)
    except ValidationError as e:
        bad = ", ".join(_ENV_MAP[str(err["loc"][0])] for err in e.errors())
        raise ConfigurationError(f"invalid value for {bad}")
