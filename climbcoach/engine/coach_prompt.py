"""Coach prompting — system prompt for the chat model and offline canned replies."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from climbcoach.engine.insights import parse_date
from climbcoach.engine.scoring import to_number

NO_DATA_REPLY = (
    "I don't see any assessment data yet. Please complete an assessment first "
    "so I can provide personalized advice!"
)

REST = "Rest"


def latest_assessment(records: Optional[Sequence[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    """Newest record by assessment date; undated records lose to dated ones."""
    if not records:
        return None
    return max(records, key=lambda r: parse_date(r.get("assessment_date")) or date.min)


def format_training_schedule(schedule: Optional[Dict[str, Any]]) -> str:
    if not schedule:
        return "No training schedule available"
    lines = [
        f"- {day}: {activity}"
        for day, activity in schedule.items()
        if activity and activity != REST
    ]
    return "\n    ".join(lines)


def training_days(schedule: Optional[Dict[str, Any]]) -> int:
    return sum(1 for activity in (schedule or {}).values() if activity and activity != REST)


def _na(value: Any) -> Any:
    return "N/A" if value is None or value == "" else value


def _long_date(value: Any) -> str:
    parsed = parse_date(value)
    if parsed is None:
        return "unknown date"
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def build_system_prompt(record: Dict[str, Any]) -> str:
    """Describe the athlete's latest assessment for the coach model."""
    personal = record.get("personal_info") or {}
    schedule = record.get("training_schedule") or {}

    return f"""You are an expert climbing coach AI assistant analyzing data from the latest assessment ({_long_date(record.get("assessment_date"))}):

    Performance Metrics:
    - Finger Strength: {_na(record.get("finger_strength_weight"))} kg
    - Pull-ups: {_na(record.get("pull_ups"))} reps
    - Push-ups: {_na(record.get("push_ups"))} reps
    - Toe-to-bar: {_na(record.get("toe_to_bar"))} reps
    - Leg Spread: {_na(record.get("leg_spread"))} cm

    Current Grades:
    - Boulder Grade: {_na(record.get("boulder_grade"))}
    - Lead Grade: {_na(record.get("lead_grade"))}

    Perceived Exertion (RPE):
    - Finger Strength RPE: {_na(record.get("rpe_finger_strength"))}/10
    - Pull-ups RPE: {_na(record.get("rpe_pull_ups"))}/10
    - Push-ups RPE: {_na(record.get("rpe_push_ups"))}/10
    - Toe-to-bar RPE: {_na(record.get("rpe_toe_to_bar"))}/10
    - Leg Spread RPE: {_na(record.get("rpe_leg_spread"))}/10

    Personal Info:
    - Weight: {_na(personal.get("weight"))} kg
    - Height: {_na(personal.get("height"))} cm

    Weekly Training Schedule:
    {format_training_schedule(schedule)}

    Training Days per Week: {training_days(schedule)}

    As an expert climbing coach, provide personalized advice considering:
    1. Current performance levels and grades
    2. RPE scores to gauge training intensity
    3. Areas needing improvement
    4. Realistic progression goals
    5. Injury prevention based on training load
    6. Training schedule optimization

    Keep responses concise, actionable, and encouraging. Use technical climbing terminology where appropriate.
    If specific metrics are missing, acknowledge this and provide advice based on available data."""


# ---------------------------------------------------------------------------
# Offline replies
# ---------------------------------------------------------------------------

# Checked in order; the first category with a matching keyword wins.
_CATEGORY_KEYWORDS: List[tuple] = [
    ("performance", ("perform", "progress", "grade")),
    ("training", ("train", "workout", "exercise")),
    ("goals", ("goal", "target", "aim")),
    ("technique", ("technique", "movement", "skill")),
]

FOLLOW_UPS = [
    "Would you like more specific details about their training metrics?",
    "Should we analyze their progression in more detail?",
    "Would you like recommendations for their next training phase?",
    "Shall we look at their strength-to-weight ratios more closely?",
]


def reply_category(message: str) -> str:
    lowered = message.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(k in lowered for k in keywords):
            return category
    return "default"


def _category_replies(category: str, record: Dict[str, Any]) -> List[str]:
    name = (record.get("personal_info") or {}).get("name") or record.get("name") or "the athlete"
    boulder = record.get("boulder_grade")
    lead = record.get("lead_grade")
    finger = to_number(record.get("finger_strength_weight"))
    pull_ups = record.get("pull_ups")
    goal = (record.get("goals") or {}).get("current_goal")

    if category == "performance":
        strength = f"With a finger strength of {finger:g}kg, " if finger else ""
        pulls = f"ability to do {pull_ups} pull-ups combined with " if pull_ups else ""
        return [
            f"Based on {name}'s data, they're climbing at {boulder} in bouldering and {lead} in lead. "
            f"{strength}they show potential for advancement.",
            f"Looking at their metrics, {name}'s {pulls}their current climbing grades suggests "
            "they might benefit from focused technique training.",
        ]
    if category == "training":
        focus = "foundational finger strength work" if (finger or 0) < 20 else "advanced hangboard protocols"
        return [
            f"For {name}'s current level ({boulder} boulder/{lead} lead), I recommend a structured training "
            "plan focusing on weakness identification and progressive overload.",
            f"Based on their metrics, {name} could benefit from {focus} combined with technique drills.",
        ]
    if category == "goals":
        outlook = (
            "appears achievable with focused training" if goal
            else "should be defined to create a targeted training plan"
        )
        return [
            f"{name}'s current goal is {goal or 'not specified'}. Given their current level, this {outlook}.",
            f"To help {name} progress towards their goals, let's focus on specific benchmarks in both "
            "bouldering and lead climbing.",
        ]
    if category == "technique":
        return [
            f"For {name}'s current grade ({boulder}), focusing on advanced movement patterns and body "
            "positioning would be beneficial.",
            f"Given their performance data, {name} might benefit from structured technique drills, "
            "particularly on overhanging terrain.",
        ]
    return [
        f"I've analyzed {name}'s data. Would you like to focus on their performance metrics, training plan, "
        "or goal progression?",
        f"Based on {name}'s recent assessments, I can provide insights about their climbing progression. "
        "What specific aspect interests you?",
    ]


def fallback_reply(message: str, record: Optional[Dict[str, Any]]) -> str:
    """Canned keyword-matched reply. The pick is a function of the message, so it repeats."""
    if record is None:
        return NO_DATA_REPLY
    replies = _category_replies(reply_category(message), record)
    seed = sum(ord(c) for c in message)
    return f"{replies[seed % len(replies)]}\n\n{FOLLOW_UPS[seed % len(FOLLOW_UPS)]}"
