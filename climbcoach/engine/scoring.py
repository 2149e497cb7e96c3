"""Scoring engine — normalize assessment metrics, composite score, grade prediction."""

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional, Tuple

# ---------------------------------------------------------------------------
# Areas and weights
# ---------------------------------------------------------------------------

AREAS: List[str] = [
    "finger_strength",
    "pull_ups",
    "push_ups",
    "core_strength",
    "flexibility",
]

AREA_LABELS: Dict[str, str] = {
    "finger_strength": "Finger Strength",
    "pull_ups": "Pull-ups",
    "push_ups": "Push-ups",
    "core_strength": "Core Strength",
    "flexibility": "Flexibility",
}

# Pull-up and core weights were swapped between revisions of the dashboard.
WEIGHT_PROFILES: Dict[str, Dict[str, float]] = {
    "v1": {
        "finger_strength": 0.45,
        "pull_ups": 0.20,
        "push_ups": 0.10,
        "core_strength": 0.15,
        "flexibility": 0.10,
    },
    "v2": {
        "finger_strength": 0.45,
        "pull_ups": 0.15,
        "push_ups": 0.10,
        "core_strength": 0.20,
        "flexibility": 0.10,
    },
}

DEFAULT_WEIGHT_PROFILE = "v2"
DEFAULT_WEIGHTS = WEIGHT_PROFILES[DEFAULT_WEIGHT_PROFILE]

DEFAULT_BODY_WEIGHT_KG = 70.0
DEFAULT_HEIGHT_CM = 170.0


def weights_for(profile: Optional[str]) -> Dict[str, float]:
    """Return the weight table for a named profile. Raises ValueError if unknown."""
    key = profile or DEFAULT_WEIGHT_PROFILE
    if key not in WEIGHT_PROFILES:
        raise ValueError(f"Unknown weight profile: {key!r}")
    return WEIGHT_PROFILES[key]


# ---------------------------------------------------------------------------
# Grade tables
# ---------------------------------------------------------------------------

# Evaluated top-down with >=, so a score on a boundary gets the higher grade.
GRADE_LADDER: List[Tuple[float, str]] = [
    (1.45, "V12"),
    (1.30, "V11"),
    (1.15, "V10"),
    (1.05, "V9"),
    (0.95, "V8"),
    (0.85, "V7"),
    (0.75, "V6"),
    (0.65, "V5"),
]
FLOOR_GRADE = "V4"

GRADE_BUCKETS: List[str] = [FLOOR_GRADE] + [g for _, g in reversed(GRADE_LADDER)]
_BUCKET_INDEX = {g: i for i, g in enumerate(GRADE_BUCKETS)}

BOULDER_TO_LEAD: Dict[str, str] = {
    "V0": "6a", "V1": "6a+",
    "V2": "6b", "V3": "6b+",
    "V4": "6c+", "V5": "7a",
    "V6": "7a+", "V7": "7b+",
    "V8": "7c", "V9": "7c+",
    "V10": "8a", "V11": "8a+",
    "V12": "8b", "V13": "8b+",
}

RECOMMENDATIONS: Dict[str, Dict[str, str]] = {
    "finger_strength": {
        "exercises": "Max hangs on 20mm edge, 2x/week with 72h rest",
        "protocol": "7s hang, 3min rest, 4-6 sets at RPE 8-9",
    },
    "pull_ups": {
        "exercises": "Weighted pull-ups and max rep sets",
        "protocol": "3-5 sets of 3-5 reps with added weight, 2x/week",
    },
    "push_ups": {
        "exercises": "Weighted push-ups and decline push-ups",
        "protocol": "3-4 sets of 8-12 reps, 2-3x/week",
    },
    "core_strength": {
        "exercises": "Toe to bar progression and front lever work",
        "protocol": "4 sets to technical failure, 2-3x/week",
    },
    "flexibility": {
        "exercises": "Dynamic and static stretching for splits",
        "protocol": "15-20 minutes daily, focus on active flexibility",
    },
}


def grade_for_score(composite: float) -> str:
    """Map a composite score to a boulder grade label."""
    for threshold, grade in GRADE_LADDER:
        if composite >= threshold:
            return grade
    return FLOOR_GRADE


def grade_bucket(grade: str) -> int:
    """Return the ladder index for a predicted grade. Raises ValueError if unknown."""
    if grade not in _BUCKET_INDEX:
        raise ValueError(f"Unknown predicted grade: {grade!r}")
    return _BUCKET_INDEX[grade]


def lead_grade_for(boulder_grade: Optional[str]) -> Optional[str]:
    """Look up the lead grade for a boulder grade. Grades outside the table give None."""
    if not boulder_grade:
        return None
    return BOULDER_TO_LEAD.get(boulder_grade)


# ---------------------------------------------------------------------------
# Value parsing
# ---------------------------------------------------------------------------

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


def to_number(value: Any) -> Optional[float]:
    """Best-effort numeric conversion. Strings keep their first number ("1.40 m" -> 1.4)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER_RE.search(value)
        if not match:
            return None
        number = float(match.group(0))
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _body_value(record: Dict[str, Any], key: str, fallback: float) -> float:
    personal = record.get("personal_info") or {}
    value = to_number(personal.get(key)) if isinstance(personal, dict) else None
    if value is None:
        value = to_number(record.get(key))
    if value is None or value <= 0:
        return fallback
    return value


def _metric(record: Dict[str, Any], key: str) -> float:
    value = to_number(record.get(key))
    if value is None or value < 0:
        return 0.0
    return value


# ---------------------------------------------------------------------------
# Normalizer / scorer
# ---------------------------------------------------------------------------

def normalize(record: Optional[Dict[str, Any]]) -> Dict[str, float]:
    """Normalize one assessment against body weight and height.

    Strength metrics are divided by body weight (kg), flexibility by height
    (cm). Finger strength is total load over body weight, so 1.0 means the
    athlete hung with no added weight. Missing, malformed or negative values
    count as zero; body weight and height fall back to 70 kg / 170 cm.

    Returns:
        Dict with keys in AREAS order, each a finite non-negative float.
    """
    record = record or {}
    body_weight = _body_value(record, "weight", DEFAULT_BODY_WEIGHT_KG)
    height = _body_value(record, "height", DEFAULT_HEIGHT_CM)

    added = _metric(record, "finger_strength_weight")
    finger = (added + body_weight) / body_weight

    return {
        "finger_strength": finger,
        "pull_ups": _metric(record, "pull_ups") / body_weight,
        "push_ups": _metric(record, "push_ups") / body_weight,
        "core_strength": _metric(record, "toe_to_bar") / body_weight,
        "flexibility": _metric(record, "leg_spread") / height,
    }


def score(vector: Dict[str, float], weights: Optional[Dict[str, float]] = None) -> float:
    """Weighted sum of a normalized vector (DEFAULT_WEIGHTS unless given)."""
    weights = weights or DEFAULT_WEIGHTS
    total = 0.0
    for area in AREAS:
        total += weights[area] * (vector.get(area) or 0.0)
    return total


# ---------------------------------------------------------------------------
# Area analysis
# ---------------------------------------------------------------------------

def rank_areas(vector: Dict[str, float]) -> List[str]:
    """Areas sorted by raw normalized value, highest first. Ties keep AREAS order."""
    return sorted(AREAS, key=lambda area: -(vector.get(area) or 0.0))


def analyze_areas(vector: Dict[str, float]) -> Dict[str, Any]:
    """Strongest, weakest and secondary-focus areas by raw (unweighted) value.

    On an exact tie the area listed first in AREAS wins, at both ends.
    """
    ranked = rank_areas(vector)
    ascending = sorted(AREAS, key=lambda area: vector.get(area) or 0.0)
    weakest = ascending[0]
    secondary = ascending[1]
    return {
        "ranking": ranked,
        "strongest_area": ranked[0],
        "weakest_area": weakest,
        "secondary_area": secondary,
        "recommendations": {
            "primary": dict(RECOMMENDATIONS[weakest]),
            "secondary": dict(RECOMMENDATIONS[secondary]),
        },
    }


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def predict_grade(
    record: Optional[Dict[str, Any]],
    weights: Optional[Dict[str, float]] = None,
) -> Optional[Dict[str, Any]]:
    """Predict a boulder grade from one assessment.

    Args:
        record: Canonical assessment record (see field_mapping). None gives None.
        weights: Composite weights; defaults to DEFAULT_WEIGHTS.

    Returns:
        Dict with predicted_grade, lead_grade, confidence, composite_score,
        metrics, strongest_area, weakest_area, secondary_area and
        recommendations (primary / secondary).
    """
    if record is None:
        return None

    metrics = normalize(record)
    composite = score(metrics, weights)
    predicted = grade_for_score(composite)
    areas = analyze_areas(metrics)

    return {
        "predicted_grade": predicted,
        "lead_grade": lead_grade_for(predicted),
        "confidence": "Medium",
        "composite_score": composite,
        "metrics": metrics,
        "strongest_area": areas["strongest_area"],
        "weakest_area": areas["weakest_area"],
        "secondary_area": areas["secondary_area"],
        "recommendations": areas["recommendations"],
    }
