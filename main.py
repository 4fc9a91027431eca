"""
Retirement Corpus Planner - FastAPI Backend
Features:
- Sustainable withdrawal yield and required corpus per horizon
- Historical stress test against Sensex / S&P 500 return sequences
- Rebalancing with capital-gains tax drag
- Stepped-up monthly contribution plan for any shortfall
- CSV or JSON parameter input
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.plan import router as plan_router
from config import get_config

config = get_config()

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Retirement Corpus Planner API",
    description="Retirement corpus sizing with historical market stress tests",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(plan_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": config.service_name}


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    logger.info("Starting %s on %s:%d", config.service_name, config.host, config.port)
    uvicorn.run("main:app", host=config.host, port=config.port, reload=True)
