from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sessionview.constants import (
    CLAUDE_PLANS_DIRNAME,
    DEFAULT_API_HOST,
    DEFAULT_API_PORT,
    DEFAULT_CLAUDE_HOME,
    DEFAULT_SESSION_LIMIT,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class SessionsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    limit: int = Field(default=DEFAULT_SESSION_LIMIT, ge=1)


class PlansConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    # Defaults to <claude_home>/plans when unset
    directory: Optional[str] = None


class ApiConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    host: str = DEFAULT_API_HOST
    port: int = Field(default=DEFAULT_API_PORT, ge=1, le=65535)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    level: LogLevel = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept lower-case level names."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    claude_home: str = DEFAULT_CLAUDE_HOME
    sessions: SessionsConfig = SessionsConfig()
    plans: PlansConfig = PlansConfig()
    api: ApiConfig = ApiConfig()
    logging: LoggingConfig = LoggingConfig()

    def claude_home_path(self) -> Path:
        return Path(self.claude_home).expanduser()

    def plans_path(self) -> Path:
        if self.plans.directory:
            return Path(self.plans.directory).expanduser()
        return self.claude_home_path() / CLAUDE_PLANS_DIRNAME
