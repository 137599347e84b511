"""
IP Admission Middleware
=======================
Consults the admission store before the normal security pipeline runs.

- BLOCKED: rejected with 403
- TRUSTED: request.state.skip_security_checks = True
- NONE: request.state.skip_security_checks = False
"""

from typing import Set
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
import structlog

from ..config import DEFAULT_EXCLUDED_PATHS
from .models import IpStatus
from .store import AdmissionStore

logger = structlog.get_logger(__name__)


class IpAdmissionMiddleware(BaseHTTPMiddleware):
    """
    Middleware that applies per-IP admission decisions.
    
    Store outages read as IpStatus.NONE, so requests fall through to the
    normal security checks rather than being blocked or trusted.
    """
    
    def __init__(
        self,
        app,
        store: AdmissionStore,
        excluded_paths: Set[str] = None,
    ):
        super().__init__(app)
        self.store = store
        self.excluded_paths = excluded_paths or DEFAULT_EXCLUDED_PATHS
    
    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP from the direct connection."""
        client = request.client
        if client:
            return client.host
        return "unknown"
    
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        
        if path in self.excluded_paths:
            return await call_next(request)
        
        client_ip = self._get_client_ip(request)
        ip_status = await self.store.read(client_ip)
        
        request.state.ip_status = ip_status
        request.state.skip_security_checks = ip_status == IpStatus.TRUSTED
        
        if ip_status == IpStatus.BLOCKED:
            logger.warning(
                "blocked_ip_rejected",
                ip=client_ip,
                path=path,
                method=request.method,
            )
            return self._blocked_response()
        
        return await call_next(request)
    
    def _blocked_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=403,
            content={
                "error": "access_denied",
                "message": "Your IP has been blocked.",
                "code": "IP_BLOCKED",
            }
        )
