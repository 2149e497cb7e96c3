"""Analysis router — grade prediction, insights and progress for an athlete."""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, Query

from climbcoach.api.deps import get_record_store, get_weights, store_error_to_http
from climbcoach.api.models import PredictRequest
from climbcoach.engine.coach_prompt import training_days
from climbcoach.engine.insights import (
    chronological,
    find_plateaus,
    generate_insights,
    performance_score,
    progress_series,
    progression_rate,
    strength_ratios,
)
from climbcoach.engine.scoring import predict_grade, weights_for
from climbcoach.services.record_store import AirtableRecordStore, RecordStoreError

router = APIRouter(prefix="/api/analysis", tags=["analysis"])

PLATEAU_METRICS = ("finger_strength_weight", "pull_ups", "push_ups", "toe_to_bar")


@router.get("")
def get_analysis(
    email: str = Query(..., description="Athlete email"),
    store: AirtableRecordStore = Depends(get_record_store),
    weights: Dict[str, float] = Depends(get_weights),
):
    """Full analysis of an athlete's assessment history."""
    try:
        records = store.fetch_assessments(email)
    except RecordStoreError as e:
        raise store_error_to_http(e)

    if not records:
        raise HTTPException(status_code=404, detail="No assessment data available")

    history = chronological(records)
    latest = history[-1]

    return {
        "email": email,
        "assessment_count": len(history),
        "latest": latest,
        "prediction": predict_grade(latest, weights),
        "performance_score": performance_score(latest),
        "progression_rate": progression_rate(history),
        "insights": generate_insights(history),
        "strength_ratios": strength_ratios(latest),
        "plateaus": {m: find_plateaus(history, m) for m in PLATEAU_METRICS},
        "training_days": training_days(latest.get("training_schedule")),
        "progress": progress_series(history),
    }


@router.post("/predict")
def predict(req: PredictRequest, weights: Dict[str, float] = Depends(get_weights)):
    """Predict a grade for an inline canonical record."""
    if req.weight_profile:
        try:
            weights = weights_for(req.weight_profile)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
    return predict_grade(req.record, weights)
