"""Configuration settings models using Pydantic."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TRACE_PREFIX = "Running: "


class TraceSettings(BaseModel):
    """Configuration for command tracing."""

    enabled: bool = False
    prefix: str = DEFAULT_TRACE_PREFIX


class GitSettings(BaseModel):
    """Configuration for git process execution."""

    # None keeps the blocking behaviour: a hung git process hangs the caller.
    timeout: Optional[float] = Field(default=None, gt=0)


class Settings(BaseSettings):
    """Main library settings."""

    model_config = SettingsConfigDict(
        env_prefix="GITOPERATIONS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    trace: TraceSettings = Field(default_factory=TraceSettings)
    git: GitSettings = Field(default_factory=GitSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v
