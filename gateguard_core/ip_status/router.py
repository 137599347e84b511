"""
IP Status Router
================
Operator endpoints for listing and bulk-updating IP admission statuses.

Usage:
    from gateguard_core.ip_status import RedisAdmissionStore, create_ip_status_router
    
    store = RedisAdmissionStore.from_url(settings.REDIS_URL)
    app.include_router(create_ip_status_router(store))
"""

from typing import List

from fastapi import APIRouter, HTTPException, Response, status
import structlog

from ..errors import StorageError
from .models import IpStatusPayload
from .store import AdmissionStore

logger = structlog.get_logger(__name__)

# User-friendly error message
USER_FRIENDLY_MESSAGE = "We are experiencing a storage issue. Please try again shortly."


def create_ip_status_router(
    store: AdmissionStore,
    prefix: str = "",
    tags: List[str] = None,
) -> APIRouter:
    """
    Create the /ip-status router.
    
    Args:
        store: Admission store to read from and write to
        prefix: Optional route prefix
        tags: OpenAPI tags
        
    Returns:
        APIRouter with GET and POST /ip-status
    """
    router = APIRouter(prefix=prefix, tags=tags or ["ip-status"])
    
    @router.post("/ip-status", status_code=status.HTTP_204_NO_CONTENT)
    async def post_ip_status(payload: List[IpStatusPayload]) -> Response:
        try:
            await store.bulk_insert(payload)
        except StorageError as e:
            logger.warning(
                "ip_status_write_failed",
                operation=e.operation,
                error=e.message,
            )
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail={
                    "error": "Service temporarily unavailable",
                    "message": USER_FRIENDLY_MESSAGE,
                    "code": "IP_STATUS_WRITE_FAILED",
                },
            ) from e
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    
    @router.get("/ip-status", response_model=List[IpStatusPayload])
    async def get_ip_status_list() -> List[IpStatusPayload]:
        statuses = await store.read_all()
        return [
            IpStatusPayload(ip=ip, status=code)
            for ip, code in statuses.items()
        ]
    
    return router
