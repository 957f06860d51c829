"""
Product Entity

A sellable product and its on-hand stock.
"""

from dataclasses import dataclass, field

from orderflow.core.domain import (
    AggregateRoot,
    InsufficientStockException,
    Money,
    Quantity,
    ValidationException,
)

from ..exceptions import ProductInactiveException

NAME_MAX_LENGTH = 200


@dataclass(eq=False)
class Product(AggregateRoot[int]):
    """
    Product aggregate root.

    Stock is only changed in storage through the stock ledger; the entity
    mirrors the last value read or written.

    Example:
        ```python
        product = Product(name="Widget", price=Money.of("10.00"), stock=Quantity(5))
        product.ensure_orderable(3)
        ```
    """

    name: str = ""
    description: str | None = None
    price: Money = field(default_factory=Money.zero)
    stock: Quantity = field(default_factory=Quantity.zero)
    is_active: bool = True

    def __post_init__(self):
        self._validate_name(self.name)

    @staticmethod
    def _validate_name(name: str) -> None:
        if not name or not name.strip():
            raise ValidationException("Product name is required", field="name")
        if len(name) > NAME_MAX_LENGTH:
            raise ValidationException(
                f"Product name cannot exceed {NAME_MAX_LENGTH} characters",
                field="name",
            )

    @property
    def stock_quantity(self) -> int:
        return self.stock.value

    def is_available(self, quantity: int = 1) -> bool:
        """Active and holding at least `quantity` units."""
        return self.is_active and self.stock.is_available(quantity)

    def is_low_stock(self, threshold: int) -> bool:
        return self.is_active and self.stock.value <= threshold

    def ensure_orderable(self, quantity: int) -> None:
        """
        Check that `quantity` units can be ordered right now.

        Raises:
            ProductInactiveException: If the product is deactivated
            InsufficientStockException: If stock is below the quantity
        """
        if not self.is_active:
            raise ProductInactiveException(self.id, self.name)
        if not self.stock.is_available(quantity):
            raise InsufficientStockException(
                product_id=self.id,
                requested=quantity,
                available=self.stock.value,
                product_name=self.name,
            )

    def update_details(self, name: str | None = None, description: str | None = None) -> None:
        if name is not None:
            self._validate_name(name)
            self.name = name.strip()
        if description is not None:
            self.description = description
        self.touch()

    def change_price(self, new_price: Money) -> None:
        """Change the live price. Existing order items keep their snapshot."""
        self.price = new_price
        self.touch()

    def activate(self) -> None:
        self.is_active = True
        self.touch()

    def deactivate(self) -> None:
        self.is_active = False
        self.touch()
