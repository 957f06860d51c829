"""
Ordering Infrastructure Layer

SQLAlchemy repositories, the unit of work and notification delivery.
"""

from .repositories import SQLAlchemyOrderRepository, SQLAlchemyProductRepository
from .services import EventNotificationService, register_logging_handlers
from .unit_of_work import SQLAlchemyUnitOfWork

__all__ = [
    "SQLAlchemyOrderRepository",
    "SQLAlchemyProductRepository",
    "SQLAlchemyUnitOfWork",
    "EventNotificationService",
    "register_logging_handlers",
]
