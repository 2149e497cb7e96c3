import json
from copy import deepcopy

import pytest

from climbcoach.engine.field_mapping import (
    CURRENT_VERSION,
    MAPPINGS_DIR,
    FieldMapping,
    FieldMappingError,
    available_versions,
    load_field_mapping,
    to_store_fields,
    transform_record,
    transform_records,
)


def _raw(fields, record_id="rec1"):
    return {"id": record_id, "fields": fields}


def _v1_payload() -> dict:
    return json.loads((MAPPINGS_DIR / "field_mappings.v1.json").read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

def test_shipped_catalogs_validate():
    assert set(available_versions()) >= {"v0", "v1"}
    for version in available_versions():
        mapping = load_field_mapping(version)
        assert mapping.version == version
        assert "assessment_date" in mapping.canonical_names


def test_current_version_is_default():
    assert load_field_mapping() is load_field_mapping(CURRENT_VERSION)


def test_unknown_version_raises():
    with pytest.raises(FieldMappingError):
        load_field_mapping("v99")


def test_schema_violation_lists_every_problem():
    payload = _v1_payload()
    payload["fields"][0]["kind"] = "blob"
    del payload["source"]
    with pytest.raises(FieldMappingError) as exc:
        FieldMapping.from_dict(payload)
    msg = str(exc.value)
    assert "fields.0.kind" in msg
    assert "source" in msg


def test_group_without_members_is_rejected():
    payload = _v1_payload()
    payload["fields"].append({"name": "extra", "kind": "group", "aliases": ["X"]})
    with pytest.raises(FieldMappingError):
        FieldMapping.from_dict(payload)


def test_duplicate_field_name_rejected():
    payload = _v1_payload()
    payload["fields"].append(deepcopy(payload["fields"][0]))
    with pytest.raises(FieldMappingError, match="Duplicate"):
        FieldMapping.from_dict(payload)


def test_required_field_must_be_mapped():
    payload = _v1_payload()
    payload["required"] = ["not_a_field"]
    with pytest.raises(FieldMappingError, match="not_a_field"):
        FieldMapping.from_dict(payload)


# ---------------------------------------------------------------------------
# transform_record
# ---------------------------------------------------------------------------

def test_transform_full_v1_record():
    record = transform_record(_raw({
        "Email": "dana@example.com",
        "Created": "2024-03-01T09:15:00.000Z",
        "Bouldering grade at 80%": "V6",
        "FB Weight": "35 kg",
        "PU MAX": 10,
        "PUSH UP MAX": "15",
        "T2b MAX": 5,
        "LEG SPREAD": "150",
        "RPE FB": 8,
        "Weight": 70,
        "height": 175,
        "Current Goal": "V7 by summer",
        "Training Schedule": {"Monday": "Climbing", "Tuesday": "Rest"},
    }))
    assert record["id"] == "rec1"
    assert record["email"] == "dana@example.com"
    assert record["assessment_date"] == "2024-03-01"
    assert record["boulder_grade"] == "V6"
    assert record["finger_strength_weight"] == 35.0
    assert record["push_ups"] == 15.0
    assert record["leg_spread"] == 150.0
    assert record["personal_info"]["weight"] == 70
    assert record["personal_info"]["height"] == 175
    assert record["goals"]["current_goal"] == "V7 by summer"
    assert record["training_schedule"]["Monday"] == "Climbing"


def test_first_alias_wins():
    record = transform_record(_raw({
        "Created": "2024-03-01",
        "דירוג בולדרינג 80%": "V5",
        "Bouldering grade at 80%": "V9",
    }))
    assert record["boulder_grade"] == "V5"


def test_later_alias_used_when_first_missing():
    record = transform_record(_raw({
        "Created": "2024-03-01",
        "Lead grade at 80%": "7a",
        "Maximum pull-ups": 12,
    }))
    assert record["lead_grade"] == "7a"
    assert record["pull_ups"] == 12.0


def test_missing_fields_are_none_and_schedule_defaults_to_empty():
    record = transform_record(_raw({"Created": "2024-03-01", "Bouldering grade at 80%": "V4"}))
    assert record["pull_ups"] is None
    assert record["training_schedule"] == {}
    assert record["equipment"] == {
        "fingerboard_size": None,
        "home_fingerboard": None,
        "home_trx": None,
        "home_wall": None,
    }


def test_unparseable_number_is_none():
    record = transform_record(_raw({
        "Created": "2024-03-01",
        "Bouldering grade at 80%": "V4",
        "PU MAX": "lots",
    }))
    assert record["pull_ups"] is None


def test_record_without_date_is_dropped():
    assert transform_record(_raw({"Bouldering grade at 80%": "V4"})) is None


def test_record_without_any_grade_is_dropped():
    assert transform_record(_raw({"Created": "2024-03-01", "PU MAX": 10})) is None


def test_malformed_raw_is_dropped():
    assert transform_record(None) is None
    assert transform_record({"id": "x"}) is None
    assert transform_record({"id": "x", "fields": "oops"}) is None


def test_transform_records_keeps_valid_only():
    raws = [
        _raw({"Created": "2024-03-01", "Bouldering grade at 80%": "V4"}, "a"),
        _raw({"Created": "2024-03-02"}, "b"),
        _raw({"Created": "2024-03-03", "Lead grade at 80%": "6c"}, "c"),
    ]
    assert [r["id"] for r in transform_records(raws)] == ["a", "c"]


def test_legacy_v0_columns():
    mapping = load_field_mapping("v0")
    record = transform_record(_raw({
        "Date": "2023-06-10",
        "Grade": "V3",
        "FingerStrength": 12,
        "CoreStrength": 8,
        "TrainingDays": "4",
    }), mapping)
    assert record["assessment_date"] == "2023-06-10"
    assert record["boulder_grade"] == "V3"
    assert record["toe_to_bar"] == 8.0
    assert record["training_days"] == 4.0


# ---------------------------------------------------------------------------
# to_store_fields
# ---------------------------------------------------------------------------

def test_to_store_fields_uses_first_alias_and_skips_readonly():
    fields = to_store_fields({
        "assessment_date": "2024-03-01",
        "boulder_grade": "V6",
        "pull_ups": 10,
        "push_ups": None,
        "personal_info": {"weight": 70, "height": None},
    })
    assert "Created" not in fields
    assert fields["דירוג בולדרינג 80%"] == "V6"
    assert fields["PU MAX"] == 10
    assert "PUSH UP MAX" not in fields
    assert fields["Weight"] == 70
    assert "height" not in fields


def test_to_store_fields_ignores_unknown_keys():
    assert to_store_fields({"favourite_crag": "Fontainebleau"}) == {}
