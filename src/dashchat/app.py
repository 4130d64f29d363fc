"""
DashChat Application

FastAPI application for the dashboard chat core: rooms, messages,
blog comments and realtime delivery.
"""
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Config
from .errors import ChatError, PersistenceError, ValidationError, fields_from_errors
from .services.engine_service import get_engine_service, init_engine_service
from .routes import (
    health_router,
    auth_router,
    rooms_router,
    messages_router,
    comments_router,
    realtime_router,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if Config.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("dashchat.app")

# Suppress noisy loggers
logging.getLogger("asyncpg").setLevel(logging.WARNING)

# Create FastAPI application
app = FastAPI(
    title="DashChat API",
    description="Chat rooms, direct messages, blog comments and realtime delivery for the internal dashboard",
    version="0.1.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup"""
    logger.info("Starting DashChat...")

    try:
        await init_engine_service()
        logger.info("DashChat started successfully")
    except Exception as e:
        logger.error(f"Failed to start DashChat: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down DashChat...")

    try:
        engine = get_engine_service()
        await engine.close()
        logger.info("DashChat shutdown complete")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


# Error handlers

@app.exception_handler(ChatError)
async def chat_error_handler(request: Request, exc: ChatError):
    """Convert service errors to {"error", "type"} responses"""
    if isinstance(exc, PersistenceError):
        logger.error(f"{request.method} {request.url.path} failed in storage: {exc.__cause__ or exc}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Schema failures are client errors with field-level detail"""
    error = ValidationError("Invalid request", fields_from_errors(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "type": "HTTPError"},
        headers=getattr(exc, "headers", None),
    )


# Include routers
app.include_router(health_router, tags=["health"])
app.include_router(auth_router, tags=["auth"])
app.include_router(rooms_router, tags=["rooms"])
app.include_router(messages_router, tags=["messages"])
app.include_router(comments_router, tags=["comments"])
app.include_router(realtime_router, tags=["realtime"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "DashChat",
        "version": "0.1.0",
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=Config.API_HOST,
        port=Config.API_PORT
    )
