"""
Ordering Application Services
"""

from .expiry_sweep import ExpirySweepService, SweepReport
from .order_lifecycle import OrderLifecycle
from .stock_ledger import StockLedger

__all__ = [
    "StockLedger",
    "OrderLifecycle",
    "ExpirySweepService",
    "SweepReport",
]
