"""Runtime settings, read from the environment (and a local .env file when present)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv

from climbcoach.engine.roles import COACH
from climbcoach.engine.scoring import DEFAULT_WEIGHT_PROFILE

logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _split(value: Optional[str]) -> Tuple[str, ...]:
    return tuple(item.strip() for item in (value or "").split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    airtable_api_key: Optional[str] = None
    airtable_base_id: Optional[str] = None
    airtable_table: str = "tblzfyMtUyoSUglLf"
    airtable_endpoint: str = "https://api.airtable.com"
    field_mapping_version: str = "v1"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    coach_emails: Tuple[str, ...] = ()
    cors_origins: Tuple[str, ...] = ("http://localhost:5173",)
    weight_profile: str = DEFAULT_WEIGHT_PROFILE
    log_level: str = "INFO"

    @property
    def role_mapping(self) -> Dict[str, str]:
        return {email: COACH for email in self.coach_emails}

    @property
    def record_store_configured(self) -> bool:
        return bool(self.airtable_api_key and self.airtable_base_id)


def _log_level(value: Optional[str], default: str) -> str:
    level = (value or default).strip().upper()
    if level not in LOG_LEVELS:
        logger.warning("Unknown log level %r, using %s", value, default)
        return default
    return level


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build Settings from environment variables. Existing variables win over .env values."""
    load_dotenv(env_file)
    env = os.environ
    defaults = Settings()
    return Settings(
        airtable_api_key=env.get("AIRTABLE_API_KEY") or None,
        airtable_base_id=env.get("AIRTABLE_BASE_ID") or None,
        airtable_table=env.get("AIRTABLE_TABLE", defaults.airtable_table),
        airtable_endpoint=env.get("AIRTABLE_ENDPOINT", defaults.airtable_endpoint),
        field_mapping_version=env.get("CLIMBCOACH_FIELD_MAPPING", defaults.field_mapping_version),
        openai_api_key=env.get("OPENAI_API_KEY") or None,
        openai_model=env.get("OPENAI_MODEL", defaults.openai_model),
        coach_emails=_split(env.get("CLIMBCOACH_COACH_EMAILS")),
        cors_origins=_split(env.get("CLIMBCOACH_CORS_ORIGINS")) or defaults.cors_origins,
        weight_profile=env.get("CLIMBCOACH_WEIGHT_PROFILE", defaults.weight_profile),
        log_level=_log_level(env.get("CLIMBCOACH_LOG_LEVEL"), defaults.log_level),
    )
