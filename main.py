"""
Crease - Live Cricket Scoring API
"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crease.config import settings
from crease.database import init_db
from crease.api.match import router as match_router

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

# Initialize FastAPI app
app = FastAPI(
    title="Crease",
    description="Ball-by-ball scoring API for limited-overs cricket",
    version="0.1.0",
)

# CORS origins - configurable via environment variable
default_origins = [
    "http://localhost:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:5174",
]

# Add custom origins from environment (comma-separated)
if settings.CORS_ORIGINS:
    default_origins.extend([o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()])

# CORS middleware for the scoring and viewer frontends
app.add_middleware(
    CORSMiddleware,
    allow_origins=default_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(match_router, prefix="/api")


@app.on_event("startup")
def startup_event():
    """Initialize database on startup"""
    init_db()


@app.get("/")
def root():
    """Health check endpoint"""
    return {
        "name": "Crease API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/api/health")
def health_check():
    """API health check"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
