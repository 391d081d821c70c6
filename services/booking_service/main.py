import logging

from fastapi import FastAPI

from shared.log import configure_logging
from shared.middleware import RequestLoggingMiddleware

from .config import SERVICE_NAME
from .publisher import publisher
from .routes import router

configure_logging(SERVICE_NAME)
logger = logging.getLogger(__name__)

app = FastAPI(title="Booking Service")
app.add_middleware(RequestLoggingMiddleware)
app.include_router(router)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "events_enabled": publisher.enabled,
    }


@app.on_event("startup")
async def startup():
    # Never crash the service if RabbitMQ is temporarily unavailable
    try:
        await publisher.connect()
    except Exception as e:
        logger.warning("RabbitMQ connect failed at startup; continuing without events: %s", e)


@app.on_event("shutdown")
async def shutdown():
    await publisher.close()
