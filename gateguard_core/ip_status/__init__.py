"""
IP Status Module
================
Per-IP admission decisions (trusted / blocked / none) persisted in Redis.
"""

from .models import IpStatus, IpStatusPayload, DEFAULT_STATUS
from .store import AdmissionStore
from .redis_store import RedisAdmissionStore
from .in_memory import InMemoryAdmissionStore
from .router import create_ip_status_router
from .middleware import IpAdmissionMiddleware

__all__ = [
    # Models
    "IpStatus",
    "IpStatusPayload",
    "DEFAULT_STATUS",
    # Stores
    "AdmissionStore",
    "RedisAdmissionStore",
    "InMemoryAdmissionStore",
    # HTTP
    "create_ip_status_router",
    "IpAdmissionMiddleware",
]
