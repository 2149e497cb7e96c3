"""Climb-coach API — FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from climbcoach.api.deps import close_record_stores, get_settings
from climbcoach.api.routers import (
    analysis,
    assessments,
    auth,
    chat,
    coach,
    roadmap,
)

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        close_record_stores()


app = FastAPI(title="climb-coach", version="0.1.0", lifespan=lifespan)

# CORS: allow the dashboard dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(auth.router)
app.include_router(assessments.router)
app.include_router(analysis.router)
app.include_router(coach.router)
app.include_router(chat.router)
app.include_router(roadmap.router)


@app.get("/health")
def health():
    return {"status": "ok"}
