"""
Orderflow - order fulfillment consistency core.

Keeps product stock and order records consistent across order creation,
status transitions, cancellation and the expiry sweep.
"""

__version__ = "0.1.0"
