"""
Order Entity

An order with its priced line items and lifecycle status.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from orderflow.core.domain import AggregateRoot, Money, ValidationException, as_utc, utc_now

from ..events import OrderStatusChanged
from ..exceptions import EmptyOrderException, InvalidTransitionException
from ..value_objects.order_status import OrderStatus


@dataclass
class OrderItem:
    """
    Line item of an order.

    `unit_price` and `product_name` are snapshots taken when the order was
    placed and never follow later product changes.
    """

    product_id: int
    quantity: int
    unit_price: Money
    product_name: str = ""
    id: int | None = None
    order_id: int | None = None

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValidationException("Quantity must be greater than 0", field="quantity")

    @property
    def total_price(self) -> Money:
        """quantity x unit price"""
        return self.unit_price.multiply(self.quantity)


@dataclass(eq=False)
class Order(AggregateRoot[int]):
    """
    Order aggregate root.

    Status changes go through `transition_to`, which enforces the transition
    table and the terminality of Delivered and Cancelled.

    Example:
        ```python
        order = Order.create(user_id=7, items=[item], shipping_address="1 Main St")
        order.transition_to(OrderStatus.PROCESSING)
        ```
    """

    user_id: int = 0
    order_date: datetime = field(default_factory=utc_now)
    status: OrderStatus = OrderStatus.PENDING
    shipping_address: str | None = None
    items: list[OrderItem] = field(default_factory=list)
    total_amount: Money = field(default_factory=Money.zero)
    completed_at: datetime | None = None

    @classmethod
    def create(
        cls,
        user_id: int,
        items: list[OrderItem],
        shipping_address: str | None = None,
        now: datetime | None = None,
    ) -> "Order":
        """
        Create a Pending order whose total is the sum of its line totals.

        Raises:
            EmptyOrderException: If no items are given
        """
        if not items:
            raise EmptyOrderException()

        now = now or utc_now()
        order = cls(
            user_id=user_id,
            order_date=now,
            status=OrderStatus.PENDING,
            shipping_address=shipping_address,
            items=list(items),
            created_at=now,
            updated_at=now,
        )
        order.total_amount = order.calculate_total()
        return order

    def calculate_total(self) -> Money:
        total = Money.zero()
        for item in self.items:
            total = total.add(item.total_price)
        return total

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal()

    def is_stale(self, now: datetime, threshold: timedelta) -> bool:
        """Pending and placed strictly before `now - threshold`."""
        return self.status == OrderStatus.PENDING and as_utc(self.order_date) < now - threshold

    def transition_to(self, target: OrderStatus, now: datetime | None = None) -> OrderStatus:
        """
        Move to `target` status.

        Sets `completed_at` when delivered and records an OrderStatusChanged
        event. Stock side effects of a cancellation belong to the caller.

        Returns:
            The previous status

        Raises:
            InvalidTransitionException: If the current status is terminal or
                the table does not allow the move
        """
        if not self.status.can_transition_to(target):
            raise InvalidTransitionException(self.id, self.status.value, target.value)

        now = now or utc_now()
        previous = self.status
        self.status = target
        if target == OrderStatus.DELIVERED:
            self.completed_at = now
        self.touch(now)

        self._record_event(
            OrderStatusChanged(
                order_id=self.id,
                user_id=self.user_id,
                status=target.value,
                previous_status=previous.value,
            )
        )
        return previous
