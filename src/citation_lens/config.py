"""Configuration loader for citation-lens."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from citation_lens.domain.errors import ConfigError


class AppConfig(BaseModel):
    name: str = Field(default="citation-lens")
    environment: str = Field(default="development")


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")


class AnswerConfig(BaseModel):
    api_key: str = Field(default="")
    base_url: str = Field(default="https://api.perplexity.ai")
    model: str = Field(default="sonar")
    temperature: float = Field(default=0.7)
    top_p: float = Field(default=0.9)
    system_prompt: str = Field(default="You are a helpful AI assistant. Be concise and clear in your responses.")
    timeout_s: int = Field(default=60)


class VisionConfig(BaseModel):
    api_key: str = Field(default="")
    base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    model: str = Field(default="gemini-2.0-pro-exp-02-05")
    available_models: list[str] = Field(
        default_factory=lambda: [
            "gemini-2.0-flash",
            "gemini-2.0-flash-lite-preview-02-05",
            "gemini-2.0-pro-exp-02-05",
            "gemini-1.5-pro-latest",
            "gemini-1.5-flash-latest",
            "gemini-1.5-flash-8b-latest",
        ]
    )
    timeout_s: int = Field(default=120)
    reject_malformed_boxes: bool = Field(default=False)


class ScreenshotConfig(BaseModel):
    api_key: str = Field(default="")
    base_url: str = Field(default="https://api.screenshotone.com/take")
    format: str = Field(default="jpg")
    image_quality: int = Field(default=80)
    block_ads: bool = Field(default=True)
    block_cookie_banners: bool = Field(default=True)
    block_trackers: bool = Field(default=True)
    timeout_s: int = Field(default=90)


class ChatConfig(BaseModel):
    max_citations_to_annotate: int = Field(default=1)


class Settings(BaseModel):
    app: AppConfig = Field(default_factory=AppConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    answer: AnswerConfig = Field(default_factory=AnswerConfig)
    vision: VisionConfig = Field(default_factory=VisionConfig)
    screenshot: ScreenshotConfig = Field(default_factory=ScreenshotConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)


DEFAULT_CONFIG_PATH = Path("config/default.yaml")

# Env var -> (section, key); api keys are read under their vendor names.
API_KEY_ENV = {
    "answer": "PERPLEXITY_API_KEY",
    "vision": "GEMINI_API_KEY",
    "screenshot": "SCREENSHOT_API_KEY",
}

_INT_KEYS = {"timeout_s", "image_quality", "max_citations_to_annotate"}
_FLOAT_KEYS = {"temperature", "top_p"}
_BOOL_KEYS = {"reject_malformed_boxes"}


def _load_yaml(path: Path, required: bool) -> dict:
    if not path.exists():
        if required:
            raise ConfigError(f"Config file not found: {path}")
        return {}
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _apply_env_overrides(data: dict) -> dict:
    overrides = {
        ("app", "environment"): os.getenv("APP_ENV"),
        ("logging", "level"): os.getenv("LOG_LEVEL"),
        ("answer", "api_key"): os.getenv(API_KEY_ENV["answer"]),
        ("answer", "model"): os.getenv("ANSWER_MODEL"),
        ("answer", "timeout_s"): os.getenv("ANSWER_TIMEOUT_S"),
        ("vision", "api_key"): os.getenv(API_KEY_ENV["vision"]),
        ("vision", "model"): os.getenv("VISION_MODEL"),
        ("vision", "timeout_s"): os.getenv("VISION_TIMEOUT_S"),
        ("vision", "reject_malformed_boxes"): os.getenv("VISION_REJECT_MALFORMED_BOXES"),
        ("screenshot", "api_key"): os.getenv(API_KEY_ENV["screenshot"]),
        ("screenshot", "timeout_s"): os.getenv("SCREENSHOT_TIMEOUT_S"),
        ("chat", "max_citations_to_annotate"): os.getenv("CHAT_MAX_CITATIONS"),
    }
    for (section, key), value in overrides.items():
        if value is None:
            continue
        if section not in data or data[section] is None:
            data[section] = {}
        if key in _BOOL_KEYS:
            data[section][key] = str(value).strip().lower() in {"1", "true", "yes", "on"}
            continue
        if key in _INT_KEYS:
            try:
                data[section][key] = int(value)
                continue
            except ValueError:
                # keep original if conversion fails
                pass
        if key in _FLOAT_KEYS:
            try:
                data[section][key] = float(value)
                continue
            except ValueError:
                pass
        data[section][key] = value
    return data


def load_config(path: Optional[Path] = None) -> Settings:
    """Load configuration from YAML and environment variables.

    An explicit ``path`` must exist; the default path is optional and falls back
    to built-in defaults.
    """
    load_dotenv()
    config_path = path or DEFAULT_CONFIG_PATH
    raw = _load_yaml(config_path, required=path is not None)
    merged = _apply_env_overrides(raw)
    return Settings(**merged)


@dataclass
class ConfigCheck:
    ok: bool
    missing: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.ok:
            return "All API keys configured."
        return "Missing API keys: " + ", ".join(self.missing)


def validate_settings(settings: Settings) -> ConfigCheck:
    """Report which service API keys are absent. Never raises."""
    missing = []
    for section, env_name in API_KEY_ENV.items():
        if not getattr(settings, section).api_key:
            missing.append(env_name)
    return ConfigCheck(ok=not missing, missing=missing)


def require_api_key(api_key: str, env_name: str) -> str:
    if not api_key:
        raise ConfigError(f"Missing {env_name} environment variable")
    return api_key


__all__ = [
    "Settings",
    "AppConfig",
    "LoggingConfig",
    "AnswerConfig",
    "VisionConfig",
    "ScreenshotConfig",
    "ChatConfig",
    "ConfigCheck",
    "API_KEY_ENV",
    "load_config",
    "validate_settings",
    "require_api_key",
]
