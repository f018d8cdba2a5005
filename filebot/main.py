"""Entry point for the file search bot service."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from filebot import config
from filebot.database import init_database
from filebot.delivery_client import DeliveryTransport, TelegramDeliveryClient
from filebot.exceptions import (
    FileBotException,
    StorageUnavailableError,
    UnauthorizedFrontendError,
)
from filebot.orchestrator import RequestOrchestrator
from filebot.routes.event_routes import router as event_router
from filebot.selection_cache import SelectionCache, SelectionCacheSweeper
from filebot.services.file_service import FileService
from filebot.services.quota_service import DailyQuotaTracker
from filebot.services.search_service import KeywordSearchEngine

logger = setup_logging('filebot')

app = FastAPI(
    title="File Search Bot",
    description="Keyword file search with daily per-user delivery quotas",
    version="1.0.0"
)


def build_orchestrator(delivery: DeliveryTransport = None) -> RequestOrchestrator:
    """
    Wire the request orchestrator from configuration.
    """
    if delivery is None:
        delivery = TelegramDeliveryClient(
            token=config.TELEGRAM_TOKEN,
            base_url=config.DELIVERY_BASE_URL,
            timeout_seconds=config.DELIVERY_TIMEOUT_SECONDS,
        )

    return RequestOrchestrator(
        search_engine=KeywordSearchEngine(),
        quota_tracker=DailyQuotaTracker(tz_name=config.QUOTA_TIMEZONE),
        selection_cache=SelectionCache(ttl_seconds=config.SELECTION_TTL_SECONDS),
        file_service=FileService(),
        delivery=delivery,
        admin_ids=config.ADMIN_IDS,
        daily_limit=config.DAILY_LIMIT,
        page_size=config.RESULTS_PER_PAGE,
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(f"Request started: {request.method} {request.url.path} [request_id={request_id}]")

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Initialize database, wire the orchestrator and start the cache sweeper.
    """
    logger.info("File search bot starting up...")

    init_database()
    logger.info(f"Database initialized [path={config.DATABASE_PATH}]")

    if not config.ADMIN_IDS:
        logger.warning("ADMIN_IDS is empty - uploads and deletes are disabled")
    if not config.TELEGRAM_TOKEN:
        logger.warning("TELEGRAM_TOKEN is empty - deliveries will be rejected by the transport")

    orchestrator = build_orchestrator()
    sweeper = SelectionCacheSweeper(
        orchestrator.selection_cache,
        interval_seconds=config.SELECTION_SWEEP_INTERVAL_SECONDS,
    )
    app.state.orchestrator = orchestrator
    app.state.sweeper = sweeper

    await sweeper.start()
    logger.info(
        f"Ready: daily_limit={config.DAILY_LIMIT} page_size={config.RESULTS_PER_PAGE} "
        f"selection_ttl={config.SELECTION_TTL_SECONDS}s admins={len(config.ADMIN_IDS)}"
    )


@app.on_event("shutdown")
async def shutdown_event():
    """
    Stop background work and close the delivery session.
    """
    logger.info("File search bot shutting down...")

    sweeper = getattr(app.state, "sweeper", None)
    if sweeper:
        await sweeper.stop()

    orchestrator = getattr(app.state, "orchestrator", None)
    if orchestrator:
        await orchestrator.delivery.close()
        logger.info("Delivery client closed")


@app.exception_handler(UnauthorizedFrontendError)
async def unauthorized_frontend_handler(request: Request, exc: UnauthorizedFrontendError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Unauthorized front-end: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc), "code": "UNAUTHORIZED_FRONTEND"}
    )


@app.exception_handler(StorageUnavailableError)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Storage unavailable: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc), "code": "STORAGE_UNAVAILABLE"}
    )


@app.exception_handler(FileBotException)
async def filebot_exception_handler(request: Request, exc: FileBotException):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Unhandled bot exception: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "code": "INTERNAL_ERROR"}
    )


app.include_router(event_router)


@app.get("/")
async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "File Search Bot API", "status": "running"}


@app.get("/health")
async def health_check():
    """
    Health check endpoint for Docker healthcheck.
    """
    return {"status": "healthy", "service": "filebot"}


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "filebot.main:app",
        host=config.FILEBOT_HOST,
        port=config.FILEBOT_PORT,
    )


if __name__ == "__main__":
    main()
