"""
IP Status Models
================
Admission outcomes and the wire record used by the operator endpoint.
"""

from enum import Enum
from typing import Any, Dict, Tuple, Union

from pydantic import BaseModel, Field


class IpStatus(int, Enum):
    """Admission decision for a client IP."""
    # Follow the normal security procedure
    NONE = -1
    # Bypass security checks on the middleware layer
    TRUSTED = 0
    # Respond with 403 Forbidden
    BLOCKED = 1
    
    @classmethod
    def from_code(cls, code: int) -> "IpStatus":
        """Map a stored code to a status; unknown codes fall back to NONE."""
        return _STATUS_BY_CODE.get(code, DEFAULT_STATUS)


DEFAULT_STATUS = IpStatus.NONE

_STATUS_BY_CODE: Dict[int, IpStatus] = {
    0: IpStatus.TRUSTED,
    1: IpStatus.BLOCKED,
}


# Stored codes are int8
CODE_MIN = -128
CODE_MAX = 127


def is_valid_code(code: int) -> bool:
    return CODE_MIN <= code <= CODE_MAX


class IpStatusPayload(BaseModel):
    """A single ip -> status record."""
    ip: str = Field(min_length=1)
    status: int = Field(ge=CODE_MIN, le=CODE_MAX)


IpStatusRecord = Union[IpStatusPayload, Tuple[str, int], Dict[str, Any]]


def record_to_pair(record: IpStatusRecord) -> Tuple[str, int]:
    """
    Normalize a payload, (ip, code) pair or dict into an (ip, code) pair.
    
    Raises:
        pydantic.ValidationError: If the ip is empty or the code is not int8
    """
    if isinstance(record, dict):
        record = IpStatusPayload(**record)
    elif not isinstance(record, IpStatusPayload):
        ip, code = record
        record = IpStatusPayload(ip=ip, status=code)
    return record.ip, record.status
