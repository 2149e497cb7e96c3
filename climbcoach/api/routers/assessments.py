"""Assessments router — read and write athlete assessment records."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from climbcoach.api.deps import get_record_store, store_error_to_http
from climbcoach.api.models import AssessmentWrite
from climbcoach.services.record_store import AirtableRecordStore, RecordStoreError

router = APIRouter(prefix="/api/assessments", tags=["assessments"])


@router.get("")
def list_assessments(
    email: str = Query(..., description="Athlete email"),
    store: AirtableRecordStore = Depends(get_record_store),
):
    """Return the athlete's assessments, newest first."""
    try:
        records = store.fetch_assessments(email)
    except RecordStoreError as e:
        raise store_error_to_http(e)
    return {"assessments": records, "count": len(records)}


@router.post("")
def create_assessment(req: AssessmentWrite, store: AirtableRecordStore = Depends(get_record_store)):
    if not req.record:
        raise HTTPException(status_code=422, detail="Assessment data is required")
    try:
        created = store.create_assessment(req.record)
    except RecordStoreError as e:
        raise store_error_to_http(e)
    return {"status": "ok", "assessment": created}


@router.patch("/{record_id}")
def update_assessment(
    record_id: str,
    req: AssessmentWrite,
    store: AirtableRecordStore = Depends(get_record_store),
):
    if not req.record:
        raise HTTPException(status_code=422, detail="Assessment data is required")
    try:
        updated = store.update_assessment(record_id, req.record)
    except RecordStoreError as e:
        raise store_error_to_http(e)
    return {"status": "ok", "assessment": updated}
