"""
Main entry point for the Trade Journal API
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from tradejournal.core.config import settings
from tradejournal.core.database import init_db
from tradejournal.api.routes import api_router, set_services
from tradejournal.services.profile_service import ProfileService
from tradejournal.services.review_service import WeeklyReviewService
from tradejournal.services.trade_service import TradeJournalService

# Configure logging
Path(settings.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(settings.LOG_FILE),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Trade Journal API...")

    # Initialize database
    init_db()

    # Initialize services
    trade_service = TradeJournalService()
    profile_service = ProfileService()
    review_service = WeeklyReviewService(trade_service)
    set_services(trade_service, profile_service, review_service)

    logger.info("Trade Journal API started successfully!")

    yield

    logger.info("Trade Journal API stopped.")

# Create FastAPI app
app = FastAPI(
    title="Trade Journal API",
    description="Trade journal with derived trade economics and performance analytics",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Trade Journal API",
        "version": "1.0.0",
        "status": "running"
    }

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    from tradejournal.api import routes
    return {
        "status": "healthy",
        "trade_journal": routes.trade_service is not None,
        "profiles": routes.profile_service is not None,
        "weekly_reviews": routes.review_service is not None
    }

def main():
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower()
    )

if __name__ == "__main__":
    main()
