"""
Shared utilities used across domains: logging and in-process caching.
"""

from orderflow.core.shared.cache import MemoryCache
from orderflow.core.shared.logger import (
    ContextLogger,
    configure_logging,
    get_logger,
    get_service_logger,
)

__all__ = [
    "MemoryCache",
    "ContextLogger",
    "configure_logging",
    "get_logger",
    "get_service_logger",
]
