"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.logging_config import setup_logging
from config import (
    ADMIN_NAME,
    ADMIN_PHONE_NUMBER,
    ADMIN_USERNAME,
    API_HOST,
    API_PORT,
    CORS_ALLOWED_ORIGINS,
)
from core.database import SessionLocal
from api.routes import analytics, assignments, auth, courses, parents, progress, users
from utils.user_manager import UserManager

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="School Portal API",
    description="Backend API for school course, assignment and progress management.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(courses.router)
app.include_router(assignments.router)
app.include_router(progress.router)
app.include_router(parents.router)
app.include_router(analytics.router)


@app.on_event("startup")
def startup_tasks() -> None:
    """Seed the initial admin account when configured."""
    seed_admin()


def seed_admin() -> None:
    """Create the configured admin if no admin exists yet."""
    if not ADMIN_PHONE_NUMBER:
        logger.info("ADMIN_PHONE_NUMBER not set, skipping admin seeding")
        return
    db = SessionLocal()
    try:
        UserManager(db).ensure_admin(ADMIN_USERNAME, ADMIN_NAME, ADMIN_PHONE_NUMBER)
    finally:
        db.close()


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """API root, returns API information and documentation links.

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": "School Portal API",
        "version": "1.0.0",
        "description": "Backend API for school course, assignment and progress management.",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    print(f"🌐 Serving at: {server_url}")
    print(f"📚 API docs: {server_url}/docs")

    # reload=True enables auto-reload on code changes
    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
