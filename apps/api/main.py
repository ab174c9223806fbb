"""
Gallery Content API - FastAPI Backend
Main application entry point: content persistence, media and admin routes.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from config import settings, validate_security_settings
from routers import (
    health,
    auth,
    videos,
    lecturers,
    about,
    admin,
    media,
)
from services.persistence import StoreConfig, build_persistence_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    print("🚀 Starting Gallery Content API...")
    validate_security_settings()
    service = await build_persistence_service(StoreConfig.from_settings(settings))
    app.state.persistence = service
    if service.remote is not None:
        print("🗄️ Remote content store connected.")
    else:
        print(f"⚠️ Offline mode: content is stored in the local cache at {settings.LOCAL_CACHE_DIR}.")
    yield
    # Shutdown
    await service.close()
    print("👋 Shutting down API...")


app = FastAPI(
    title="Gallery Content API",
    description="Publish, rate and comment on short documentary videos",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(videos.router, prefix="/videos", tags=["Videos"])
app.include_router(lecturers.router, prefix="/lecturers", tags=["Lecturers"])
app.include_router(about.router, prefix="/about", tags=["About"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(media.router, prefix="/media", tags=["Media"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Gallery Content API",
        "version": "0.1.0",
        "status": "running"
    }
