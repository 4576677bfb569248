"""
FastAPI main application for Rescue Rewards.
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from rescue_rewards import __version__
from rescue_rewards.api.dependencies import get_deal_store
from rescue_rewards.api.routers import deals, insights
from rescue_rewards.config import get_store_settings

# Configure logging
logging.basicConfig(
    level=get_store_settings().log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info("Starting Rescue Rewards API...")
    store = get_deal_store()
    logger.info(
        f"Deal store ready (feed limit {store.settings.activity.feed_limit}, "
        f"deal TTL {store.settings.deals.ttl_hours}h)"
    )
    
    yield
    
    logger.info("Shutting down Rescue Rewards API...")


app = FastAPI(
    title="Rescue Rewards API",
    description="Rescue deals, activity feed and sustainability analytics",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware - allow all origins for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": __version__
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Rescue Rewards API",
        "docs": "/docs",
        "health": "/health"
    }


app.include_router(deals.router, prefix="/api", tags=["deals"])
app.include_router(insights.router, prefix="/api", tags=["insights"])
