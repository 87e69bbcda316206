"""
Docket Backend - FastAPI Application Entry Point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docket.api import game
from docket.engine.scenario import ScenarioLoader

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Let in-flight history writes finish before shutdown
    await game.get_dispatcher().drain()


app = FastAPI(
    title="Docket",
    description="Branching courtroom narrative engine",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(game.router, prefix="/api/game", tags=["game"])


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "ok", "name": "Docket", "version": "0.1.0"}


@app.get("/api/scenarios")
async def list_scenarios():
    """List available scenarios"""
    loader = ScenarioLoader()
    return {"scenarios": loader.list_scenarios()}
