"""
Gateguard Configuration
=======================
Configuration constants and environment variables.
"""

import os
from typing import Set

# Configuration from environment
IP_STATUS_TABLE = os.getenv("IP_STATUS_TABLE", "status_list")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
SERVICE_NAME = os.getenv("SERVICE_NAME", "gateguard")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Signed message protocol
ADDRESS_PREFIX = "0x"
SIGNATURE_PREFIX = "0x"
VALIDATION_DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"
PERSONAL_MESSAGE_PREFIX = "\x19Ethereum Signed Message:\n"

# Paths never subject to IP admission (health checks, metrics)
DEFAULT_EXCLUDED_PATHS: Set[str] = {"/health", "/ready", "/metrics"}
