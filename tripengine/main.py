"""
FastAPI Application Entry Point.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import router
from .config import settings


logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title="Trip Engine",
    description="Trip pricing, booking and lifecycle engine for a single traveler session",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "trips_service": settings.trips_api_base_url
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "tripengine.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
