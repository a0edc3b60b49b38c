"""Exam service FastAPI application."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.database import init_db
from api.routes import attempts, examiner, exams
from logging_setup import setup_console_logging

setup_console_logging()

app = FastAPI(title="Integrity Shield Exam API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup_events() -> None:
    """Initialize database on startup."""
    init_db()


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# Include routers
app.include_router(examiner.router)
app.include_router(exams.router)
app.include_router(attempts.router)
