"""
FastAPI application entrypoint for the persistence service.
Run with: uvicorn sheetsync.main:app --reload --port 8000

Routes are mounted at root (no /api/v1 prefix).
  - Sheet:      GET /sheet, POST /sheet/reset
  - Topics:     POST /topics, PATCH|DELETE /topics/{id}, PUT /topics/order
  - Sub-topics: POST /topics/{id}/subtopics, PATCH /subtopics/{id},
                DELETE /topics/{topic_id}/subtopics/{id}, PUT /topics/{id}/subtopics/order
  - Questions:  POST /subtopics/{id}/questions, PATCH /questions/{id},
                DELETE /subtopics/{sub_topic_id}/questions/{id}, PUT /subtopics/{id}/questions/order

Clients use sheetsync.persistence.http_impl.HttpSheetPersistence (PERSISTENCE_BACKEND=http).
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sheetsync import __version__
from sheetsync.config import settings
from sheetsync.api.questions import router as questions_router
from sheetsync.api.sheet import router as sheet_router
from sheetsync.api.subtopics import router as subtopics_router
from sheetsync.api.topics import router as topics_router

app = FastAPI(
    title="Sheetsync Persistence API",
    description="Remote of record for the checklist sheet: topics, sub-topics, questions and their order.",
    version=__version__,
)

_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins if _origins else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sheet_router)
app.include_router(topics_router)
app.include_router(subtopics_router)
app.include_router(questions_router)


@app.on_event("startup")
def startup():
    """Configure logging and report where the durable snapshot lives."""
    logging.basicConfig(level=settings.log_level_number, format="%(levelname)s %(name)s: %(message)s")
    _log = logging.getLogger("sheetsync.main")
    _log.info("Snapshot database: %s (key %s)", settings.snapshot_database_url, settings.snapshot_key)
    if settings.remote_delay_ms:
        _log.info("Simulated latency: %s ms per call", settings.remote_delay_ms)


@app.get("/health")
def health():
    """Health check (JSON)."""
    return {"status": "ok", "message": "Sheetsync Persistence API"}
