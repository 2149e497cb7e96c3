"""Shared dependencies for the climb-coach API."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Optional

from fastapi import Depends, Header, HTTPException

from climbcoach.config import Settings, load_settings
from climbcoach.engine.field_mapping import load_field_mapping
from climbcoach.engine.roles import RoleDirectory
from climbcoach.engine.scoring import weights_for
from climbcoach.services.chat import CoachChat
from climbcoach.services.record_store import (
    AirtableRecordStore,
    RecordNotFoundError,
    RecordStoreAuthError,
    RecordStoreError,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


_stores: Dict[Settings, AirtableRecordStore] = {}


def _record_store(settings: Settings) -> AirtableRecordStore:
    store = _stores.get(settings)
    if store is None:
        store = AirtableRecordStore(
            api_key=settings.airtable_api_key or "",
            base_id=settings.airtable_base_id or "",
            table=settings.airtable_table,
            endpoint=settings.airtable_endpoint,
            mapping=load_field_mapping(settings.field_mapping_version),
        )
        _stores[settings] = store
    return store


def close_record_stores() -> None:
    """Close the HTTP clients of every record store created by this process."""
    while _stores:
        _, store = _stores.popitem()
        store.close()


def get_record_store(settings: Settings = Depends(get_settings)) -> AirtableRecordStore:
    if not settings.record_store_configured:
        raise HTTPException(status_code=503, detail="Record store is not configured")
    return _record_store(settings)


@lru_cache(maxsize=1)
def _coach_chat(settings: Settings) -> CoachChat:
    return CoachChat.from_api_key(settings.openai_api_key, model=settings.openai_model)


def get_chat(settings: Settings = Depends(get_settings)) -> CoachChat:
    return _coach_chat(settings)


def get_roles(settings: Settings = Depends(get_settings)) -> RoleDirectory:
    return RoleDirectory(settings.role_mapping)


def get_weights(settings: Settings = Depends(get_settings)) -> Dict[str, float]:
    try:
        return weights_for(settings.weight_profile)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))


def require_coach(
    x_user_email: Optional[str] = Header(None),
    roles: RoleDirectory = Depends(get_roles),
) -> str:
    """Reject callers whose X-User-Email is not mapped to the coach role."""
    if not x_user_email:
        raise HTTPException(status_code=401, detail="X-User-Email header is required")
    if not roles.is_coach(x_user_email):
        raise HTTPException(status_code=403, detail="Coach access required")
    return x_user_email


def store_error_to_http(e: RecordStoreError) -> HTTPException:
    """Translate record-store failures into API errors."""
    if isinstance(e, RecordNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, RecordStoreAuthError):
        return HTTPException(status_code=401, detail=str(e))
    logger.warning("Record store failure: %s", e)
    return HTTPException(status_code=502, detail=str(e))
