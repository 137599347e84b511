"""
Admission Store
===============
Capability interface over the persistent ip -> status code mapping.

Subclasses implement four storage primitives against a single hash table.
The policy lives here: writes raise StorageError on any failure, reads
fail open and return IpStatus.NONE so the request follows the normal
security procedure.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional
import structlog

from ..config import IP_STATUS_TABLE
from ..errors import StorageError
from .models import IpStatus, IpStatusRecord, record_to_pair

logger = structlog.get_logger(__name__)


class AdmissionStore(ABC):
    """Base class for IP admission stores."""
    
    def __init__(self, table: Optional[str] = None):
        """
        Args:
            table: Hash table name (default: IP_STATUS_TABLE)
        """
        self.table = table or IP_STATUS_TABLE
    
    # ------------------------------------------------------------------
    # Storage primitives
    # ------------------------------------------------------------------
    
    @abstractmethod
    async def _set_field(self, ip: str, code: int) -> None:
        ...
    
    @abstractmethod
    async def _set_fields(self, mapping: Dict[str, int]) -> None:
        """Write every field in one command."""
        ...
    
    @abstractmethod
    async def _get_field(self, ip: str) -> Optional[int]:
        """Return the stored code, or None when the field is absent."""
        ...
    
    @abstractmethod
    async def _get_all_fields(self) -> Dict[str, int]:
        ...
    
    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    
    async def insert(self, ip: str, status: IpStatus) -> None:
        """
        Upsert the status of a single IP.
        
        Raises:
            StorageError: If the write fails
        """
        code = int(status.value)
        try:
            await self._set_field(ip, code)
        except Exception as e:
            logger.error(
                "ip_status_insert_failed",
                ip=ip,
                table=self.table,
                error=str(e),
            )
            raise StorageError(str(e), operation="insert", table=self.table) from e
    
    async def bulk_insert(self, records: Iterable[IpStatusRecord]) -> int:
        """
        Upsert many IP statuses with a single batched command.
        
        Duplicate IPs keep the last value in caller order.
        
        Args:
            records: IpStatusPayload objects, (ip, code) pairs or dicts
            
        Returns:
            Number of distinct IPs written
            
        Raises:
            pydantic.ValidationError: If a record has an empty ip or a non-int8 code
            StorageError: If the batched write fails
        """
        mapping: Dict[str, int] = {}
        for record in records:
            ip, code = record_to_pair(record)
            mapping[ip] = code
        
        if not mapping:
            return 0
        
        try:
            await self._set_fields(mapping)
        except Exception as e:
            logger.error(
                "ip_status_bulk_insert_failed",
                count=len(mapping),
                table=self.table,
                error=str(e),
            )
            raise StorageError(str(e), operation="bulk_insert", table=self.table) from e
        
        logger.info("ip_status_bulk_insert", count=len(mapping), table=self.table)
        return len(mapping)
    
    async def read(self, ip: str) -> IpStatus:
        """Read the status of an IP, falling back to NONE on any failure."""
        try:
            code = await self._get_field(ip)
        except Exception as e:
            logger.warning(
                "ip_status_read_failed",
                ip=ip,
                table=self.table,
                error=str(e),
            )
            return IpStatus.NONE
        
        if code is None:
            return IpStatus.NONE
        return IpStatus.from_code(code)
    
    async def read_all(self) -> Dict[str, int]:
        """Read every stored ip -> raw code; empty on failure."""
        try:
            return await self._get_all_fields()
        except Exception as e:
            logger.warning(
                "ip_status_list_failed",
                table=self.table,
                error=str(e),
            )
            return {}
