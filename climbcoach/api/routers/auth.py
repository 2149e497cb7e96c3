"""Auth router — email lookup against the record store plus role resolution."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from climbcoach.api.deps import get_record_store, get_roles
from climbcoach.api.models import VerifyRequest
from climbcoach.engine.roles import RoleDirectory
from climbcoach.services.record_store import AirtableRecordStore, RecordStoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/verify")
def verify_email(
    req: VerifyRequest,
    store: AirtableRecordStore = Depends(get_record_store),
    roles: RoleDirectory = Depends(get_roles),
):
    """An email is authenticated when it has at least one assessment on record."""
    try:
        assessments = store.fetch_assessments(req.email)
    except RecordStoreError as e:
        logger.warning("Email verification failed for %s: %s", req.email, e)
        return {"is_authenticated": False, "is_coach": False, "role": None, "assessments": []}

    return {
        "is_authenticated": len(assessments) > 0,
        "is_coach": roles.is_coach(req.email),
        "role": roles.role_for(req.email),
        "assessments": assessments,
    }
