import logging

from fastapi import FastAPI
from redirector_app.config import settings
from redirector_app.database.connection import engine, Base
from redirector_app.api.v1 import resolve, redirect

# Import models to ensure they're registered with Base
from redirector_app import models  # noqa: F401

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Resolves legacy forum URLs and short links to their current destinations",
    debug=settings.debug
)


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(resolve.router, prefix="/api/v1")
app.include_router(redirect.router)
