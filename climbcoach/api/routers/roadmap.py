"""Static coaching roadmap."""

from __future__ import annotations

from fastapi import APIRouter

from climbcoach.engine.roadmap import get_roadmap

router = APIRouter(prefix="/api/roadmap", tags=["roadmap"])


@router.get("")
def roadmap():
    return get_roadmap()
