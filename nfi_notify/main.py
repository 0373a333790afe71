import logging
import os
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_delivery_config, get_retry_policy
from .domain.email.composer import MessageComposer
from .domain.email.dispatch import ResendDispatchClient
from .domain.email.router import router as notifications_router
from .domain.email.service import NotificationService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def build_notification_service(http_client: httpx.AsyncClient) -> NotificationService:
    """Wire composer, dispatch client and retry policy from process configuration"""
    delivery_config = get_delivery_config()
    return NotificationService(
        composer=MessageComposer(sender=delivery_config.sender),
        client=ResendDispatchClient(delivery_config, http_client=http_client),
        retry_policy=get_retry_policy(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    delivery_config = get_delivery_config()
    if not delivery_config.is_configured:
        logger.warning("⚠️ RESEND_API_KEY not set - notifications will fail with not_configured")
    logger.info(f"Sending notifications as {delivery_config.sender.formatted}")

    async with httpx.AsyncClient() as http_client:
        service = build_notification_service(http_client)
        app.state.notification_service = service
        yield
        await service.drain()
    logger.info("Application shutting down...")


app = FastAPI(title="NFI REPORT Notifications API", version="1.0.0", lifespan=lifespan)


# CORS Configuration
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "https://nfireport.com,https://www.nfireport.com,http://localhost:5173",
).split(",")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# Routes
app.include_router(notifications_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
