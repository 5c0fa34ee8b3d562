"""
Tax Estimator - FastAPI Backend
Features:
- 2025 federal ordinary bracket breakdown
- Long-term capital gains stacked on ordinary income (0% / 15% / 20%)
- Refund or amount due against withholding
- JSON or CSV input, CSV export of inputs
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from api.estimates import router as estimates_router

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Tax Estimator API",
    description="Simplified U.S. federal income tax estimate for a single tax year. Not tax advice.",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(estimates_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint for deployment"""
    return {"status": "healthy", "service": "tax-estimator-api"}


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    logger.info("Starting tax estimator on %s:%s", config.HOST, config.PORT)
    uvicorn.run("main:app", host=config.HOST, port=config.PORT, reload=True)
