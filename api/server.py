import os
import logging
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
import uvicorn

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from config.logging_config import apply_logging_config
from setup_logging_optimized import get_logger

# Configure logging for the entire application
apply_logging_config()

load_dotenv(override=True)

logger = get_logger(__name__)

if os.getenv("SENTRY_DSN"):
    sentry_logging = LoggingIntegration(
        level=logging.INFO,        # Capture info and above as breadcrumbs
        event_level=logging.ERROR  # Send errors as events
    )
    sentry_sdk.init(
        dsn=os.getenv("SENTRY_DSN"),
        integrations=[
            FastApiIntegration(transaction_style='endpoint'),
            sentry_logging,
        ],
        traces_sample_rate=0.1,
        environment=os.getenv("ENV", "development"),
        send_default_pii=False,
    )

from api.requests.api_design_assets import router as design_assets_router
from api.requests.api_generate_slides import router as generate_slides_router
from api.requests.api_generate_slides_stream import router as generate_slides_stream_router
from api.requests.api_presentations import router as presentations_router

app = FastAPI(title="Slide Generation API")

ENVIRONMENT = (os.getenv("ENVIRONMENT") or os.getenv("ENV") or "development").lower()

allowed_origins = {
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "").split(",")
    if origin.strip()
}

if ENVIRONMENT != "production":
    # In non-production, also allow localhost and common dev ports
    allowed_origins.update(
        {
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        }
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(generate_slides_stream_router)
app.include_router(generate_slides_router)
app.include_router(presentations_router)
app.include_router(design_assets_router)


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "9090"))
    logger.info(f"Server configured to run on {host}:{port}")
    uvicorn.run("api.server:app", host=host, port=port, reload=True, workers=1)
