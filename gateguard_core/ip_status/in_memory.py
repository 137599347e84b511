"""
In-Memory Admission Store
=========================
Dictionary-backed admission store for development and testing.
"""

from typing import Dict, Optional

from .store import AdmissionStore


class InMemoryAdmissionStore(AdmissionStore):
    """
    In-memory admission store.
    
    For development and testing only.
    Use RedisAdmissionStore in production.
    
    Set ``fail_with`` to an exception to simulate a store outage; every
    storage primitive raises it until it is cleared.
    """
    
    def __init__(self, table: Optional[str] = None):
        super().__init__(table)
        self._tables: Dict[str, Dict[str, int]] = {}
        self.fail_with: Optional[Exception] = None
        self.commands = 0
    
    def _hash(self) -> Dict[str, int]:
        if self.fail_with is not None:
            raise self.fail_with
        self.commands += 1
        return self._tables.setdefault(self.table, {})
    
    async def _set_field(self, ip: str, code: int) -> None:
        self._hash()[ip] = code
    
    async def _set_fields(self, mapping: Dict[str, int]) -> None:
        self._hash().update(mapping)
    
    async def _get_field(self, ip: str) -> Optional[int]:
        return self._hash().get(ip)
    
    async def _get_all_fields(self) -> Dict[str, int]:
        return dict(self._hash())
