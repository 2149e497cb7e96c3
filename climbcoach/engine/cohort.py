"""Cohort analysis — average relative strength per boulder grade across athletes."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from climbcoach.engine.insights import boulder_grade_to_number
from climbcoach.engine.scoring import DEFAULT_BODY_WEIGHT_KG, to_number

logger = logging.getLogger(__name__)

UNGRADED = "Ungraded"
SUSPICIOUS_ADDED_WEIGHT_KG = 200
SUSPICIOUS_FINGER_RATIO = 3

_METRICS = ("finger_strength", "pull_ups", "push_ups", "toe_to_bar")


def _athlete_metrics(email: str, assessment: Dict[str, Any]) -> Dict[str, float]:
    personal = assessment.get("personal_info") or {}
    body_weight = to_number(personal.get("weight"))
    if body_weight is None or body_weight <= 0:
        logger.warning("Invalid body weight for %s: %r", email, personal.get("weight"))
        body_weight = DEFAULT_BODY_WEIGHT_KG

    added = to_number(assessment.get("finger_strength_weight"))
    if added is None:
        added = 0.0
    if added > SUSPICIOUS_ADDED_WEIGHT_KG:
        logger.warning("Suspiciously high added weight for %s: %s", email, added)

    finger = 1.0
    if added > 0:
        finger = (added + body_weight) / body_weight
        if finger > SUSPICIOUS_FINGER_RATIO:
            logger.warning("Very high finger strength ratio for %s: %.2f", email, finger)

    return {
        "finger_strength": finger,
        "pull_ups": (to_number(assessment.get("pull_ups")) or 0.0) / body_weight,
        "push_ups": (to_number(assessment.get("push_ups")) or 0.0) / body_weight,
        "toe_to_bar": (to_number(assessment.get("toe_to_bar")) or 0.0) / body_weight,
    }


def _grade_sort_key(grade: str) -> tuple:
    number = boulder_grade_to_number(grade)
    if number is None:
        return (1, 0, grade)
    return (0, number, grade)


def _median_grade(groups: List[Dict[str, Any]]) -> Optional[str]:
    """Grade of the middle athlete (upper middle for an even count). Groups must be sorted."""
    total = sum(g["count"] for g in groups)
    if total == 0:
        return None
    position = total // 2
    for g in groups:
        if position < g["count"]:
            return g["grade"]
        position -= g["count"]
    return None


def analyze_cohorts(athletes: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Group athletes by their latest boulder grade.

    Args:
        athletes: [{"email": ..., "latest_assessment": {...}}, ...]

    Returns:
        Dict with "groups" (one per grade, easiest first, ungraded last),
        "distribution" (per-metric value/grade points), "athlete_count",
        "median_grade" and "most_common_grade".
    """
    groups: Dict[str, Dict[str, Any]] = {}
    distribution: Dict[str, List[Dict[str, Any]]] = {m: [] for m in _METRICS}

    for athlete in athletes:
        assessment = athlete.get("latest_assessment") or {}
        email = athlete.get("email") or "<unknown>"
        grade = assessment.get("boulder_grade") or UNGRADED
        metrics = _athlete_metrics(email, assessment)

        group = groups.setdefault(grade, {
            "grade": grade,
            "count": 0,
            "totals": {m: 0.0 for m in _METRICS},
        })
        group["count"] += 1
        for m in _METRICS:
            group["totals"][m] += metrics[m]
            distribution[m].append({"value": metrics[m], "grade": grade})

    ordered = sorted(groups.values(), key=lambda g: _grade_sort_key(g["grade"]))
    out_groups: List[Dict[str, Any]] = []
    for g in ordered:
        entry: Dict[str, Any] = {"grade": g["grade"], "count": g["count"]}
        for m in _METRICS:
            entry[f"avg_{m}"] = g["totals"][m] / g["count"]
        out_groups.append(entry)

    most_common = None
    best = 0
    for g in out_groups:
        if g["count"] > best:
            best = g["count"]
            most_common = g["grade"]

    return {
        "groups": out_groups,
        "distribution": distribution,
        "athlete_count": len(athletes),
        "median_grade": _median_grade(out_groups),
        "most_common_grade": most_common,
    }
