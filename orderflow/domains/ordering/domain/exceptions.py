"""
Ordering Domain Exceptions
"""

from typing import Any

from orderflow.core.domain.exceptions import (
    BusinessRuleViolationException,
    DomainException,
    ErrorKind,
    InvalidOperationException,
    ValidationException,
)


class EmptyOrderException(ValidationException):
    """Raised when an order is requested without any items."""

    def __init__(self):
        super().__init__("Order must contain at least one item", field="items")


class ProductInactiveException(BusinessRuleViolationException):
    """Raised when an inactive product is ordered."""

    def __init__(self, product_id: int, product_name: str | None = None):
        self.product_id = product_id
        label = product_name or f"Product {product_id}"
        super().__init__(
            "product_must_be_active",
            f"{label} is not active",
            {"product_id": product_id},
        )
        self.code = "PRODUCT_INACTIVE"


class ProductInUseException(BusinessRuleViolationException):
    """Raised when deleting a product that order items still reference."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(
            "referenced_product_cannot_be_deleted",
            f"Product {product_id} is referenced by existing orders and cannot be deleted",
            {"product_id": product_id},
        )
        self.code = "PRODUCT_IN_USE"


class InvalidStatusException(DomainException):
    """Raised when a status value is not one of the recognized order statuses."""

    kind = ErrorKind.INVALID_STATE

    def __init__(self, value: Any, allowed: list[str]):
        self.value = value
        super().__init__(
            f"Invalid order status '{value}'. Allowed values: {', '.join(allowed)}",
            "INVALID_STATUS",
            {"value": str(value), "allowed": allowed},
        )


class InvalidTransitionException(InvalidOperationException):
    """Raised when an order cannot move from its current status to the target."""

    def __init__(self, order_id: int | None, current_status: str, target_status: str):
        self.order_id = order_id
        self.target_status = target_status
        super().__init__(
            operation=f"transition to {target_status}",
            current_state=current_status,
            message=f"Order {order_id} cannot transition from {current_status} to {target_status}",
            code="INVALID_TRANSITION",
        )
        self.details["order_id"] = order_id
        self.details["target_status"] = target_status
