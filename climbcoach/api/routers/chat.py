"""Chat router — ask the coach about an athlete's latest assessment."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from climbcoach.api.deps import get_chat, get_record_store, store_error_to_http
from climbcoach.api.models import ChatRequest
from climbcoach.services.chat import CoachChat
from climbcoach.services.record_store import AirtableRecordStore, RecordStoreError

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("")
def post_chat(
    req: ChatRequest,
    store: AirtableRecordStore = Depends(get_record_store),
    chat: CoachChat = Depends(get_chat),
):
    try:
        records = store.fetch_assessments(req.email)
    except RecordStoreError as e:
        raise store_error_to_http(e)
    return {"reply": chat.reply(req.message, records)}
