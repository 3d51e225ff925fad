"""Configuration management with Pydantic Settings + optional YAML."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from skillhook.utils.platform import get_config_dir, get_default_skills_root


class ServerConfig(BaseModel):
    bind: str = "0.0.0.0"
    port: int = 4040
    webhook_path: str = "/webhook"
    max_body_size: int = 10 * 1024 * 1024

    @field_validator("webhook_path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        return value if value.startswith("/") else f"/{value}"


class SkillsConfig(BaseModel):
    root: str = ""
    manifest_name: str = "skill.json"
    capability_key: str = "webhook"
    exclude: list[str] = Field(default_factory=list)

    def get_root(self) -> Path:
        if self.root:
            return Path(self.root).expanduser()
        return get_default_skills_root()


class ForwardConfig(BaseModel):
    event_field: str = "event"
    default_id_path: str = "payload.object.id"
    http_timeout: float = 10.0
    command_timeout: float = 120.0
    output_limit: int = 500
    max_concurrent_commands: int = Field(default=4, ge=1)


class NotifyConfig(BaseModel):
    """Operator notification target.

    With ``url`` set, notifications are POSTed there; otherwise the external
    binary is run with ``args`` formatted with channel, target and text.
    """
    binary_path: str = "openclaw"
    args: list[str] = Field(
        default_factory=lambda: [
            "message", "send",
            "--channel", "{channel}",
            "--target", "{target}",
            "--message", "{text}",
        ]
    )
    channel: str = "telegram"
    target: str = ""
    url: str = ""
    timeout: float = 30.0


class DispatchConfig(BaseModel):
    max_concurrent: int = Field(default=4, ge=1)
    queue_size: int = Field(default=256, ge=1)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SKILLHOOK_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    skills: SkillsConfig = Field(default_factory=SkillsConfig)
    forward: ForwardConfig = Field(default_factory=ForwardConfig)
    notify: NotifyConfig = Field(default_factory=NotifyConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    event_log_path: str = ""
    log_level: str = "INFO"
    log_json: bool = False


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from env vars, optionally overlaying a YAML config."""
    yaml_data: dict[str, Any] = {}

    # Determine config file path
    if config_path is None:
        config_path = os.environ.get("SKILLHOOK_CONFIG")
    if config_path is None:
        default = get_config_dir() / "config.yaml"
        if default.exists():
            config_path = default

    # Load YAML if found
    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

    # Build settings: YAML values are passed as init kwargs and win over env vars
    return Settings(**yaml_data)
