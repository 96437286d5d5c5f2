import logging
import os
from typing import Optional

from pydantic import BaseModel, ValidationError, field_validator

from .models import DEFAULT_DISPLAY_LIMIT, check_display_limit
from .toast import TOAST_SECONDS


class ConfigError(RuntimeError):
    pass


class Settings(BaseModel):
    load_api_url: str
    load_api_timeout: float = 10.0
    toast_seconds: float = TOAST_SECONDS
    display_limit: int = DEFAULT_DISPLAY_LIMIT
    log_level: str = "INFO"

    @field_validator("load_api_url")
    @classmethod
    def _url_has_scheme(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("load_api_timeout", "toast_seconds")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @field_validator("display_limit")
    @classmethod
    def _allowed_limit(cls, v: int) -> int:
        return check_display_limit(v)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {v!r}")
        return v


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return value


def load_settings() -> Settings:
    """Read settings from the environment. LOAD_API_URL is required."""
    url = _env("LOAD_API_URL")
    if not url:
        raise ConfigError("LOAD_API_URL is not set")

    raw = {"load_api_url": url}
    optional = {
        "load_api_timeout": "LOAD_API_TIMEOUT",
        "toast_seconds": "LOAD_BOARD_TOAST_SECONDS",
        "display_limit": "LOAD_BOARD_DISPLAY_LIMIT",
        "log_level": "LOAD_BOARD_LOG_LEVEL",
    }
    for field, env_name in optional.items():
        value = _env(env_name)
        if value is not None:
            raw[field] = value

    try:
        return Settings(**raw)
    except ValidationError as exc:
        problems = "; ".join(f"{e['loc'][0]}: {e['msg']}" for e in exc.errors())
        raise ConfigError(f"invalid load board settings: {problems}") from exc


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
