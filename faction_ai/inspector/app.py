"""FastAPI application exposing faction AI analysis for debug overlays."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from .api_routes import router

# Initialize FastAPI app
app = FastAPI(
    title="Faction AI Inspector",
    description="Read-only influence, threat and action scoring views for faction AI",
    version=__version__,
)

# Add CORS middleware for development overlays
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router, prefix="/api")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "faction-ai-inspector"}
