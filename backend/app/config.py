# -*- coding: utf-8 -*-
"""Runtime configuration for the coach backend."""

from __future__ import annotations

import logging
import os
from typing import Literal, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("openai", "claude")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class CoachSettings(BaseModel):
    """Deployment settings passed explicitly to the app factory and coach service."""

    llm_provider: Literal["openai", "claude"] = "openai"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    claude_api_key: Optional[str] = None
    claude_model: str = "claude-sonnet-4-5-20250929"
    temperature: float = 0.7
    allowed_origin: str = "*"
    history_window: int = 6
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"

    @property
    def api_key(self) -> Optional[str]:
        """API key of the selected provider, if one is configured."""

        if self.llm_provider == "claude":
            return self.claude_api_key or None
        return self.openai_api_key or None

    @property
    def model(self) -> str:
        if self.llm_provider == "claude":
            return self.claude_model
        return self.openai_model


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw_value = env.get(name)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        return float(raw_value)
    except ValueError:
        logger.warning("Invalid %s value %r, using %s", name, raw_value, default)
        return default


def _read_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw_value = env.get(name)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        return int(raw_value)
    except ValueError:
        logger.warning("Invalid %s value %r, using %s", name, raw_value, default)
        return default


def _read_log_level(env: Mapping[str, str]) -> str:
    level = (env.get("LOG_LEVEL") or "INFO").strip().upper()
    if level not in LOG_LEVELS:
        logger.warning("Invalid LOG_LEVEL value %r, using INFO", level)
        return "INFO"
    return level


def load_settings(env: Optional[Mapping[str, str]] = None) -> CoachSettings:
    """Build :class:`CoachSettings` from ``env`` (the process environment by default).

    ``.env`` files are loaded first when reading from the process environment.
    """

    if env is None:
        load_dotenv()
        env = os.environ

    provider = (env.get("LLM_PROVIDER") or "openai").strip().lower()
    if provider not in SUPPORTED_PROVIDERS:
        logger.warning("Unsupported LLM provider: %s, falling back to openai", provider)
        provider = "openai"

    return CoachSettings(
        llm_provider=provider,
        openai_api_key=env.get("OPENAI_API_KEY") or None,
        openai_model=env.get("OPENAI_MODEL") or "gpt-4o-mini",
        claude_api_key=env.get("CLAUDE_API_KEY") or None,
        claude_model=env.get("CLAUDE_MODEL") or "claude-sonnet-4-5-20250929",
        temperature=_read_float(env, "LLM_TEMPERATURE", 0.7),
        allowed_origin=env.get("ALLOWED_ORIGIN") or "*",
        history_window=_read_int(env, "HISTORY_WINDOW", 6),
        log_level=_read_log_level(env),
    )


__all__ = ["CoachSettings", "LOG_LEVELS", "SUPPORTED_PROVIDERS", "load_settings"]
