"""Coaching roadmap — milestone phases, risks and tracking guidance shown to athletes."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict

_ROADMAP: Dict[str, Any] = {
    "title": "CLIMBING PROGRESS ROADMAP: COACH'S INSIGHTS",
    "milestones": [
        {
            "phase": "FOUNDATION PHASE",
            "timeframe": "First 3 Months",
            "expectations": [
                "5-10% boost in finger strength",
                "Establish baseline metrics",
                "Develop fundamental climbing techniques",
                "Initial endurance improvements",
            ],
            "insight": (
                "Success here depends on consistency - commit to 2-3 sessions weekly. This is your "
                "technique-building phase, so focus on quality over difficulty."
            ),
        },
        {
            "phase": "DEVELOPMENT PHASE",
            "timeframe": "3-6 Months",
            "expectations": [
                "Finger strength will jump 15-25%",
                "Climb about half to one grade harder",
                "Pull-up strength will improve 10-15%",
            ],
            "insight": (
                "This is where you'll see rapid gains. The key is balancing your enthusiasm with proper "
                "rest periods. Many climbers try to rush this phase - don't fall into that trap."
            ),
        },
        {
            "phase": "CONSOLIDATION PHASE",
            "timeframe": "6-12 Months",
            "expectations": [
                "Total finger strength improvement reaches 25-35%",
                "Climb 1-2 grades harder than starting point",
                "Overall strength metrics improve 15-20%",
            ],
            "insight": (
                "This is where technique and strength begin to merge. Focus on movement efficiency and "
                "introducing periodic deload weeks to prevent plateaus."
            ),
        },
        {
            "phase": "MASTERY PHASE",
            "timeframe": "12+ Months",
            "expectations": [
                "Potential for 35-50% total finger strength improvement",
                "Ability to climb 2+ grades harder",
                "Significant refinement in technique",
            ],
            "insight": (
                "This is where individual programming becomes crucial. Your progress will be more "
                "nuanced, focusing on specific weaknesses and goals."
            ),
        },
    ],
    "risks": {
        "physical": [
            "Ignoring previous injuries",
            "Compromising on sleep",
            "Inadequate nutrition",
            "Overtraining syndrome",
        ],
        "technical": [
            "Rushing through technique fundamentals",
            "Sporadic training attendance",
            "Random progression without structure",
            "Insufficient rest between sessions",
        ],
    },
    "tracking": {
        "metrics": [
            "Strength tests every 3-4 months",
            "Regular technique video analysis",
            "Training log reviews",
            "Recovery quality monitoring",
        ],
        "progress_markers": [
            "Finger strength measurements",
            "Boulder grade progression",
            "Overall strength capacity",
            "Body composition changes",
        ],
    },
}


def get_roadmap() -> Dict[str, Any]:
    """Return a copy of the roadmap content."""
    return deepcopy(_ROADMAP)
