"""
Health Check Routes

Endpoints for service health monitoring.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..models.employee import utcnow
from ..services.engine_service import get_engine_service, EngineService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
@router.get("/")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": "dashchat",
        "timestamp": utcnow().isoformat()
    }


@router.get("/ready")
async def readiness_check(engine: EngineService = Depends(get_engine_service)):
    """
    Readiness check - indicates if service is ready to handle requests.
    Used by Kubernetes/orchestrators for readiness probes.
    """
    ready = engine.is_initialized and await engine.ping()
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "ready": ready,
            "channels": engine.channel_registry.channel_count,
            "connections": engine.channel_registry.connection_count,
            "timestamp": utcnow().isoformat()
        },
    )


@router.get("/live")
async def liveness_check():
    """
    Liveness check - indicates if service is running.
    Used by Kubernetes/orchestrators for liveness probes.
    """
    return {
        "alive": True,
        "timestamp": utcnow().isoformat()
    }
