"""Coach router — athlete overview, notes and cohort comparison (coach role only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from climbcoach.api.deps import get_record_store, require_coach, store_error_to_http
from climbcoach.api.models import NotesUpdate
from climbcoach.engine.cohort import analyze_cohorts
from climbcoach.services.record_store import AirtableRecordStore, RecordStoreError

router = APIRouter(prefix="/api/coach", tags=["coach"], dependencies=[Depends(require_coach)])


@router.get("/athletes")
def list_athletes(store: AirtableRecordStore = Depends(get_record_store)):
    """Every athlete with their latest assessment."""
    try:
        athletes = store.fetch_all_athletes()
    except RecordStoreError as e:
        raise store_error_to_http(e)
    return {"athletes": athletes, "count": len(athletes)}


@router.put("/notes")
def save_notes(req: NotesUpdate, store: AirtableRecordStore = Depends(get_record_store)):
    try:
        result = store.update_notes(req.email, req.notes)
    except RecordStoreError as e:
        raise store_error_to_http(e)
    return {"status": "ok", **result}


@router.get("/cohorts")
def get_cohorts(store: AirtableRecordStore = Depends(get_record_store)):
    """Average relative strength per boulder grade across all athletes."""
    try:
        athletes = store.fetch_all_athletes()
    except RecordStoreError as e:
        raise store_error_to_http(e)
    return analyze_cohorts(athletes)
