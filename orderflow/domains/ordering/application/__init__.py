"""
Ordering Application Layer

Ports, services and use cases.
"""
