from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic_settings import BaseSettings
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging

from routers.api import router as api_router
from schemas import MessageResponse
from core.service_manager import service_manager
from core.config_loader import config_loader

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    app_name: str = "Agribot Control Panel API"
    # Expose exception text in 500 responses
    debug: bool = False
    # Transport feeding the telemetry cache: mock, serial, mqtt, http, websocket or database
    # Can be overridden by the DATA_SOURCE environment variable
    data_source: str = config_loader.get_data_source_type()


settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup/shutdown without deprecated on_event."""
    try:
        logger.info("Starting background services with '%s' data source", settings.data_source)
        await service_manager.start_services(source_type=settings.data_source)
    except ValueError as e:
        logger.error("Failed to start '%s' data source: %s, falling back to mock data", settings.data_source, e)
        await service_manager.start_services(source_type="mock")

    try:
        yield
    finally:
        logger.info("Stopping background services")
        await service_manager.stop_services()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"success": False, "message": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if settings.debug else "Internal Server Error"
    return JSONResponse(status_code=500, content={"success": False, "message": message})


@app.get("/api/health", tags=["meta"], response_model=MessageResponse)
async def healthcheck() -> MessageResponse:
    return MessageResponse(message="Server is running")


# mount API router under /api
app.include_router(api_router, prefix="/api")
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
