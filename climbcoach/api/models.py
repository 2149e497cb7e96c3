"""Pydantic request models for the climb-coach API."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# --------------------------------------------------------------------------- #
# Auth
# --------------------------------------------------------------------------- #

class VerifyRequest(BaseModel):
    """Body for POST /api/auth/verify."""
    email: str


# --------------------------------------------------------------------------- #
# Assessments
# --------------------------------------------------------------------------- #

class AssessmentWrite(BaseModel):
    """Body for POST /api/assessments and PATCH /api/assessments/{id}, keyed by canonical field names."""
    record: Dict[str, Any] = Field(default_factory=dict)


# --------------------------------------------------------------------------- #
# Analysis
# --------------------------------------------------------------------------- #

class PredictRequest(BaseModel):
    """Body for POST /api/analysis/predict."""
    record: Dict[str, Any] = Field(default_factory=dict)
    weight_profile: Optional[str] = None


# --------------------------------------------------------------------------- #
# Coach
# --------------------------------------------------------------------------- #

class NotesUpdate(BaseModel):
    """Body for PUT /api/coach/notes."""
    email: str
    notes: str


# --------------------------------------------------------------------------- #
# Chat
# --------------------------------------------------------------------------- #

class ChatRequest(BaseModel):
    """Body for POST /api/chat."""
    email: str
    message: str = Field(min_length=1)
