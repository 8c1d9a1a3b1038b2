"""
Health check endpoint.
"""
from fastapi import APIRouter
from datetime import datetime, timezone
from fastapi.responses import JSONResponse

from shared.utils.logging_config import get_logger
from shared.config.settings import settings

logger = get_logger(__name__)

router = APIRouter()

@router.get("/")
async def health_check_():
    """Basic health check - is service alive?"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.api_title,
        "version": settings.api_version
    }

# Readiness: Check if dependencies are configured
@router.get("/ready")
async def readiness_check():
    """Readiness check - storage and mail transport are configured."""
    uses_table_storage = settings.repository_type != "in_memory"
    uses_smtp = settings.email_provider != "in_memory"
    services_ready = {
        "document_store": (not uses_table_storage) or bool(settings.table_storage_account_url),
        "email": (not uses_smtp) or bool(settings.smtp_host),
    }

    all_ready = all(services_ready.values())
    status_code = 200 if all_ready else 503

    return JSONResponse(
        status_code=status_code,
        content={
            "status": "ready" if all_ready else "not_ready",
            "service": settings.api_title,
            "version": settings.api_version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": services_ready,
        }
    )

@router.get("/full")
async def health_check_full():
    """Full health check - service and dependencies status."""
    dependencies_status = {
        "document_store": settings.repository_type,
        "email": settings.email_provider,
    }

    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "service": settings.api_title,
            "version": settings.api_version,
            "environment": settings.environment,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "dependencies": dependencies_status,
        }
        )
