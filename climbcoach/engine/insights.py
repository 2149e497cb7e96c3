"""Insight engine — progression rate, insight entries, plateaus over assessment history.

History-taking functions expect records oldest first. Use chronological()
to build that ordering explicitly from an unsorted list.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from climbcoach.engine.scoring import normalize, to_number

INSIGHT_TYPES = ("positive", "info", "warning")

PLATEAU_TOLERANCE = 0.05
PLATEAU_MIN_READINGS = 3
DAYS_PER_MONTH = 30


# ---------------------------------------------------------------------------
# Grade / date helpers
# ---------------------------------------------------------------------------

def boulder_grade_to_number(grade: Any) -> Optional[int]:
    """'V7' -> 7, 'V7-8' -> 7. Anything without a V-number gives None."""
    if not grade or not isinstance(grade, str):
        return None
    match = re.search(r"V(\d+)", grade)
    return int(match.group(1)) if match else None


def lead_grade_to_number(grade: Any) -> Optional[int]:
    """'7a+' -> 7. Anything without digits gives None."""
    if not grade or not isinstance(grade, str):
        return None
    match = re.search(r"(\d+)", grade)
    return int(match.group(1)) if match else None


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO date (or the date part of an ISO datetime). Returns None if unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


class Chronological(tuple):
    """Assessment records in ascending assessment-date order."""


def chronological(records: Optional[Iterable[Dict[str, Any]]]) -> Chronological:
    """Sort records oldest first. Records without a parsable date go first, in input order."""
    if isinstance(records, Chronological):
        return records
    items = list(records or [])
    return Chronological(sorted(items, key=lambda r: parse_date(r.get("assessment_date")) or date.min))


# ---------------------------------------------------------------------------
# Progression
# ---------------------------------------------------------------------------

def progression_rate(records: Sequence[Dict[str, Any]]) -> Optional[float]:
    """Boulder grades gained per month between the first and last record.

    Returns None with fewer than two records, when either end lacks a
    parsable boulder grade, or when either end has an unparseable date.
    """
    if not records or len(records) < 2:
        return None

    first, last = records[0], records[-1]
    first_grade = boulder_grade_to_number(first.get("boulder_grade"))
    last_grade = boulder_grade_to_number(last.get("boulder_grade"))
    if first_grade is None or last_grade is None:
        return None

    first_date = parse_date(first.get("assessment_date"))
    last_date = parse_date(last.get("assessment_date"))
    if first_date is None or last_date is None:
        return None

    months = (last_date - first_date).days / DAYS_PER_MONTH
    if months == 0:
        return 0.0
    return (last_grade - first_grade) / months


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

def _insight(kind: str, message: str) -> Dict[str, str]:
    return {"type": kind, "message": message}


def generate_insights(records: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Classify the latest record and the progression rate into insight entries."""
    if not records:
        return []

    insights: List[Dict[str, str]] = []
    latest = records[-1]
    rate = progression_rate(records)

    grade = boulder_grade_to_number(latest.get("boulder_grade"))
    if grade is not None:
        if grade >= 7:
            insights.append(_insight(
                "positive",
                "Your boulder grade is impressive! Consider focusing on specific weaknesses to break through plateaus.",
            ))
        elif grade <= 3:
            insights.append(_insight(
                "info",
                "Focus on technique and movement patterns to build a strong foundation for harder grades.",
            ))

    if rate is not None:
        if rate > 0.5:
            insights.append(_insight(
                "positive",
                "Great progress! Your climbing grade is improving at an impressive rate.",
            ))
        elif rate < 0.1 and len(records) >= 3:
            insights.append(_insight(
                "warning",
                "Your progression has slowed. Consider varying your training routine or seeking coaching.",
            ))

    if to_number(latest.get("finger_strength_weight")) is not None:
        finger_pct = normalize(latest)["finger_strength"] * 100
        if finger_pct > 150:
            insights.append(_insight(
                "positive",
                "Your finger strength is well-developed. Remember to maintain proper rest and recovery.",
            ))
        elif finger_pct < 120:
            insights.append(_insight(
                "info",
                "Consider incorporating more structured hangboard training to improve finger strength.",
            ))

    pull_ups = to_number(latest.get("pull_ups"))
    if pull_ups is not None:
        if pull_ups > 15:
            insights.append(_insight(
                "positive",
                "Strong pull-up performance! Consider adding weight or trying one-arm variations.",
            ))
        elif pull_ups < 5:
            insights.append(_insight(
                "info",
                "Work on building pull-up strength with assisted variations or negatives.",
            ))

    return insights


# ---------------------------------------------------------------------------
# Snapshot metrics
# ---------------------------------------------------------------------------

def performance_score(record: Optional[Dict[str, Any]]) -> int:
    """0-100 score from boulder grade, finger weight, pull-ups and push-ups.

    Each present metric contributes up to its cap (40 / 30 / 15 / 15); the
    sum is averaged over the metrics present and rescaled so a single
    maxed metric reads 100.
    """
    if not record:
        return 0

    total = 0.0
    present = 0

    grade = boulder_grade_to_number(record.get("boulder_grade"))
    if grade is not None:
        total += min(40.0, grade * 4)
        present += 1

    finger = to_number(record.get("finger_strength_weight"))
    if finger is not None:
        total += min(30.0, finger / 3)
        present += 1

    pull_ups = to_number(record.get("pull_ups"))
    if pull_ups is not None:
        total += min(15.0, pull_ups)
        present += 1

    push_ups = to_number(record.get("push_ups"))
    if push_ups is not None:
        total += min(15.0, push_ups / 2)
        present += 1

    if present == 0:
        return 0
    return int(round((total / present) * (100 / 40)))


def strength_ratios(record: Optional[Dict[str, Any]]) -> Dict[str, float]:
    record = record or {}
    pull_ups = to_number(record.get("pull_ups")) or 0.0
    push_ups = to_number(record.get("push_ups")) or 0.0
    ratios: Dict[str, float] = {}
    if pull_ups > 0:
        ratios["push_to_pull"] = push_ups / pull_ups
    return ratios


def find_plateaus(records: Sequence[Dict[str, Any]], metric: str) -> List[Dict[str, Any]]:
    """Find runs of >= 3 readings where each stays within 5% of the previous one.

    Readings with a missing value are skipped without breaking the run, so
    run boundaries are always dates of records that carry a value.
    """
    if not records or len(records) < PLATEAU_MIN_READINGS:
        return []

    plateaus: List[Dict[str, Any]] = []
    start: Optional[str] = None
    previous: Optional[float] = None
    previous_date: Any = None
    count = 0

    def close_run() -> None:
        if count >= PLATEAU_MIN_READINGS:
            plateaus.append({
                "metric": metric,
                "start": start,
                "end": previous_date,
                "value": previous,
                "duration": count,
            })

    for record in records:
        current = to_number(record.get(metric))
        if current is None:
            continue

        if previous is not None and abs(current - previous) < previous * PLATEAU_TOLERANCE:
            if start is None:
                start = previous_date
            count += 1
        else:
            close_run()
            start = None
            count = 1
        previous = current
        previous_date = record.get("assessment_date")

    close_run()
    return plateaus


def progress_series(records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Per-assessment raw metrics and RPE values for charting."""
    series: List[Dict[str, Any]] = []
    for r in records:
        series.append({
            "date": r.get("assessment_date"),
            "finger_strength": to_number(r.get("finger_strength_weight")) or 0,
            "pull_ups": to_number(r.get("pull_ups")) or 0,
            "push_ups": to_number(r.get("push_ups")) or 0,
            "toe_to_bar": to_number(r.get("toe_to_bar")) or 0,
            "rpe_finger_strength": to_number(r.get("rpe_finger_strength")) or 0,
            "rpe_pull_ups": to_number(r.get("rpe_pull_ups")) or 0,
            "rpe_push_ups": to_number(r.get("rpe_push_ups")) or 0,
            "rpe_toe_to_bar": to_number(r.get("rpe_toe_to_bar")) or 0,
            "rpe_leg_spread": to_number(r.get("rpe_leg_spread")) or 0,
        })
    return series
