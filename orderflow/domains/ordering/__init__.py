"""
Ordering Domain

Order fulfillment: stock ledger, order assembly, lifecycle, reporting and
the expiry sweep.
"""
