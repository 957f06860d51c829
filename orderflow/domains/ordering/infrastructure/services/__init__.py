"""
Ordering Infrastructure Services
"""

from .notification_service import EventNotificationService, register_logging_handlers

__all__ = ["EventNotificationService", "register_logging_handlers"]
