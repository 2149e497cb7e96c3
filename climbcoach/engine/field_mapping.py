"""Field mapping — translate record-store columns into the canonical assessment schema.

Each mapping version is a JSON catalog under catalog/field_mappings/, checked
against catalog/schemas/field_mappings.schema.json when it is loaded.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import jsonschema

from climbcoach.engine.insights import parse_date

logger = logging.getLogger(__name__)

CATALOG_DIR = Path(__file__).resolve().parents[1] / "catalog"
MAPPINGS_DIR = CATALOG_DIR / "field_mappings"
SCHEMA_PATH = CATALOG_DIR / "schemas" / "field_mappings.schema.json"

CURRENT_VERSION = "v1"

_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")


class FieldMappingError(ValueError):
    pass


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: str
    aliases: Tuple[str, ...] = ()
    members: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()
    readonly: bool = False


@dataclass(frozen=True)
class FieldMapping:
    version: str
    source: str
    fields: Tuple[FieldSpec, ...]
    required: Tuple[str, ...]
    required_any: Tuple[str, ...]

    @staticmethod
    def from_dict(payload: Dict[str, Any]) -> "FieldMapping":
        _validate_schema(payload)

        specs: List[FieldSpec] = []
        seen = set()
        for item in payload["fields"]:
            name = item["name"]
            if name in seen:
                raise FieldMappingError(f"Duplicate canonical field '{name}' in mapping {payload['version']}")
            seen.add(name)
            members = tuple(
                (member, tuple(aliases)) for member, aliases in (item.get("members") or {}).items()
            )
            specs.append(FieldSpec(
                name=name,
                kind=item["kind"],
                aliases=tuple(item.get("aliases") or ()),
                members=members,
                readonly=bool(item.get("readonly")),
            ))

        for key in list(payload["required"]) + list(payload["required_any"]):
            if key not in seen:
                raise FieldMappingError(f"Required field '{key}' is not mapped in {payload['version']}")

        return FieldMapping(
            version=payload["version"],
            source=payload["source"],
            fields=tuple(specs),
            required=tuple(payload["required"]),
            required_any=tuple(payload["required_any"]),
        )

    @property
    def canonical_names(self) -> List[str]:
        return [f.name for f in self.fields]


def _read_json(path: Path) -> Dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


def _validate_schema(payload: Dict[str, Any]) -> None:
    schema = _read_json(SCHEMA_PATH)
    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda err: list(err.absolute_path))
    if errors:
        messages: List[str] = []
        for err in errors:
            where = ".".join(str(x) for x in err.absolute_path) or "<root>"
            messages.append(f"{where}: {err.message}")
        raise FieldMappingError("Field mapping validation failed:\n- " + "\n- ".join(messages))


def available_versions() -> List[str]:
    return sorted(p.stem.split(".", 1)[1] for p in MAPPINGS_DIR.glob("field_mappings.*.json"))


_loaded: Dict[str, FieldMapping] = {}


def load_field_mapping(version: str = CURRENT_VERSION) -> FieldMapping:
    """Load and validate a mapping version. Raises FieldMappingError if missing or invalid."""
    if version in _loaded:
        return _loaded[version]

    path = MAPPINGS_DIR / f"field_mappings.{version}.json"
    if not path.exists():
        raise FieldMappingError(f"Unknown field mapping version: {version!r}. Available: {available_versions()}")

    mapping = FieldMapping.from_dict(_read_json(path))
    if mapping.version != version:
        raise FieldMappingError(f"{path.name} declares version {mapping.version!r}")
    _loaded[version] = mapping
    return mapping


# ---------------------------------------------------------------------------
# Record transformation
# ---------------------------------------------------------------------------

def _first_present(fields: Dict[str, Any], aliases: Tuple[str, ...]) -> Any:
    for alias in aliases:
        if fields.get(alias) is not None:
            return fields[alias]
    return None


def _clean_number(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    try:
        return float(cleaned)
    except ValueError:
        return None


def _convert(spec: FieldSpec, value: Any) -> Any:
    if spec.kind == "number":
        return _clean_number(value)
    if spec.kind == "date":
        parsed = parse_date(value)
        return parsed.isoformat() if parsed else None
    if spec.kind == "schedule":
        return value if isinstance(value, dict) else {}
    return value


def transform_record(raw: Optional[Dict[str, Any]], mapping: Optional[FieldMapping] = None) -> Optional[Dict[str, Any]]:
    """Map one raw store record ({"id": ..., "fields": {...}}) to a canonical assessment.

    Returns None when the record is malformed or lacks the fields the
    mapping marks as required.
    """
    if not raw or not isinstance(raw.get("fields"), dict):
        logger.warning("Skipping record with no fields: %r", raw)
        return None

    mapping = mapping or load_field_mapping()
    fields = raw["fields"]
    record: Dict[str, Any] = {"id": raw.get("id")}

    for spec in mapping.fields:
        if spec.kind == "group":
            record[spec.name] = {
                member: _first_present(fields, aliases) for member, aliases in spec.members
            }
            continue
        record[spec.name] = _convert(spec, _first_present(fields, spec.aliases))

    missing = [key for key in mapping.required if not record.get(key)]
    if missing or (mapping.required_any and not any(record.get(k) for k in mapping.required_any)):
        logger.warning(
            "Record %s missing required fields (mapping %s): %s",
            raw.get("id"), mapping.version, missing or list(mapping.required_any),
        )
        return None

    return record


def transform_records(raws: List[Dict[str, Any]], mapping: Optional[FieldMapping] = None) -> List[Dict[str, Any]]:
    """Transform a batch, dropping records that fail validation."""
    out: List[Dict[str, Any]] = []
    for raw in raws:
        record = transform_record(raw, mapping)
        if record is not None:
            out.append(record)
    return out


def to_store_fields(record: Dict[str, Any], mapping: Optional[FieldMapping] = None) -> Dict[str, Any]:
    """Reverse-map canonical keys to the first alias of each field, for writes."""
    mapping = mapping or load_field_mapping()
    fields: Dict[str, Any] = {}
    for spec in mapping.fields:
        if spec.readonly or spec.name not in record:
            continue
        value = record[spec.name]
        if spec.kind == "group":
            for member, aliases in spec.members:
                if isinstance(value, dict) and value.get(member) is not None:
                    fields[aliases[0]] = value[member]
        elif value is not None:
            fields[spec.aliases[0]] = value
    return fields
