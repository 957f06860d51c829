"""
Caching for aggregate report reads.
"""

from orderflow.core.cache.redis_client import close_async_redis_client, get_async_redis_client
from orderflow.core.cache.report_cache import ReportCache, create_report_cache

__all__ = [
    "ReportCache",
    "create_report_cache",
    "get_async_redis_client",
    "close_async_redis_client",
]
