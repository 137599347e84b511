"""
Redis Admission Store
=====================
Admission store backed by a Redis hash (HSET / HGET / HGETALL).
"""

from typing import Dict, Optional, Union

from redis.asyncio import Redis
import structlog

from ..config import REDIS_URL
from .models import is_valid_code
from .store import AdmissionStore

logger = structlog.get_logger(__name__)


def _decode(value: Union[bytes, str]) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


class RedisAdmissionStore(AdmissionStore):
    """
    Redis-backed admission store.
    
    Each status is a field of one hash named after the table. Connection
    pooling is left to the Redis client.
    """
    
    def __init__(self, redis: Redis, table: Optional[str] = None):
        """
        Args:
            redis: Async Redis client
            table: Hash name (default: IP_STATUS_TABLE)
        """
        super().__init__(table)
        self.redis = redis
    
    @classmethod
    def from_url(
        cls,
        url: Optional[str] = None,
        table: Optional[str] = None,
    ) -> "RedisAdmissionStore":
        """Create a store with a client built from a Redis URL."""
        return cls(Redis.from_url(url or REDIS_URL), table=table)
    
    async def _set_field(self, ip: str, code: int) -> None:
        await self.redis.hset(self.table, ip, code)
    
    async def _set_fields(self, mapping: Dict[str, int]) -> None:
        # One multi-field HSET
        await self.redis.hset(self.table, mapping=mapping)
    
    async def _get_field(self, ip: str) -> Optional[int]:
        value = await self.redis.hget(self.table, ip)
        if value is None:
            return None
        return int(_decode(value))
    
    async def _get_all_fields(self) -> Dict[str, int]:
        raw = await self.redis.hgetall(self.table)
        result: Dict[str, int] = {}
        for key, value in raw.items():
            ip = _decode(key)
            try:
                code = int(_decode(value))
            except ValueError:
                code = None
            if code is None or not is_valid_code(code):
                logger.warning("ip_status_invalid_code", ip=ip, table=self.table)
                continue
            result[ip] = code
        return result
    
    async def close(self) -> None:
        await self.redis.aclose()
