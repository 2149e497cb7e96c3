"""Airtable record store — assessments keyed by athlete email."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from climbcoach.engine.coach_prompt import latest_assessment
from climbcoach.engine.field_mapping import (
    FieldMapping,
    load_field_mapping,
    to_store_fields,
    transform_record,
    transform_records,
)

logger = logging.getLogger(__name__)

AIRTABLE_ENDPOINT = "https://api.airtable.com"
PAGE_SIZE = 100
MAX_ASSESSMENTS = 100
NOTES_FIELD = "Notes"


class RecordStoreError(RuntimeError):
    pass


class RecordNotFoundError(RecordStoreError):
    pass


class RecordStoreAuthError(RecordStoreError):
    pass


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class AirtableRecordStore:
    """Thin client over the Airtable REST API for one assessments table."""

    def __init__(
        self,
        api_key: str,
        base_id: str,
        table: str,
        endpoint: str = AIRTABLE_ENDPOINT,
        mapping: Optional[FieldMapping] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 15.0,
    ) -> None:
        if not api_key or not base_id:
            raise RecordStoreError("Airtable configuration missing")
        self.table = table
        self.mapping = mapping or load_field_mapping()
        self._path = f"/v0/{base_id}/{table}"
        self._client = client or httpx.Client(base_url=endpoint, timeout=timeout)
        self._headers = {"Authorization": f"Bearer {api_key}"}

    def close(self) -> None:
        self._client.close()

    # -- HTTP ------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            resp = self._client.request(method, path, headers=self._headers, **kwargs)
        except httpx.HTTPError as e:
            raise RecordStoreError(f"Record store request failed: {e}") from e

        if resp.status_code == 404:
            raise RecordNotFoundError("Assessment data not found")
        if resp.status_code in (401, 403):
            raise RecordStoreAuthError("Unable to access assessment data")
        if resp.status_code >= 400:
            raise RecordStoreError(f"Record store error {resp.status_code}: {resp.text[:200]}")
        return resp.json()

    def _list(self, params: Dict[str, Any], limit: Optional[int] = None) -> List[Dict[str, Any]]:
        records: List[Dict[str, Any]] = []
        query = dict(params)
        query["pageSize"] = PAGE_SIZE
        if limit:
            query["maxRecords"] = limit

        while True:
            data = self._request("GET", self._path, params=query)
            records.extend(data.get("records") or [])
            offset = data.get("offset")
            if not offset or (limit and len(records) >= limit):
                break
            query["offset"] = offset

        return records[:limit] if limit else records

    # -- Reads -----------------------------------------------------------

    def fetch_all_raw(self) -> List[Dict[str, Any]]:
        """Every record in the table, untransformed."""
        return self._list({})

    def fetch_raw_by_email(self, email: str) -> List[Dict[str, Any]]:
        if not email or not email.strip():
            raise RecordStoreError("Email is required")
        formula = f'LOWER(Email) = LOWER("{_escape(email.strip())}")'
        return self._list(
            {
                "filterByFormula": formula,
                "sort[0][field]": "Created",
                "sort[0][direction]": "desc",
            },
            limit=MAX_ASSESSMENTS,
        )

    def fetch_assessments(self, email: str) -> List[Dict[str, Any]]:
        """Canonical assessments for an athlete, newest first. Invalid records are dropped."""
        raws = self.fetch_raw_by_email(email)
        records = transform_records(raws, self.mapping)
        logger.info("Fetched %d records (%d valid) for %s", len(raws), len(records), email)
        return records

    def fetch_all_athletes(self) -> List[Dict[str, Any]]:
        """One entry per athlete email with their latest assessment."""
        raws = self._list({"sort[0][field]": "Created", "sort[0][direction]": "desc"})
        by_email: Dict[str, List[Dict[str, Any]]] = {}
        for record in transform_records(raws, self.mapping):
            email = (record.get("email") or "").strip().lower()
            if not email:
                continue
            by_email.setdefault(email, []).append(record)

        athletes: List[Dict[str, Any]] = []
        for email, records in sorted(by_email.items()):
            latest = latest_assessment(records)
            athletes.append({
                "email": email,
                "name": latest.get("name") or latest.get("trainee_name"),
                "assessment_count": len(records),
                "latest_assessment": latest,
            })
        return athletes

    # -- Writes ----------------------------------------------------------

    def update_raw_fields(self, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Patch store columns directly, bypassing the field mapping."""
        data = self._request("PATCH", self._path, json={"records": [{"id": record_id, "fields": fields}]})
        return (data.get("records") or [{}])[0]

    def create_assessment(self, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        fields = to_store_fields(record, self.mapping)
        data = self._request("POST", self._path, json={"records": [{"fields": fields}]})
        created = (data.get("records") or [None])[0]
        return transform_record(created, self.mapping)

    def update_assessment(self, record_id: str, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not record_id:
            raise RecordStoreError("Assessment ID is required")
        updated = self.update_raw_fields(record_id, to_store_fields(record, self.mapping))
        return transform_record(updated, self.mapping)

    def update_notes(self, email: str, notes: str) -> Dict[str, Any]:
        """Write coach notes onto the athlete's most recent record."""
        raws = self.fetch_raw_by_email(email)
        if not raws:
            raise RecordNotFoundError(f"No assessments for {email}")
        record_id = raws[0]["id"]
        updated = self.update_raw_fields(record_id, {NOTES_FIELD: notes})
        return {"id": updated.get("id", record_id), "notes": (updated.get("fields") or {}).get(NOTES_FIELD, notes)}
