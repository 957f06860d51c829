"""
Create Order Use Case

Assembles priced line items from the current product state, reserves stock
for each through the ledger and persists a Pending order, all in one unit
of work.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from orderflow.core.domain import DomainException, EntityNotFoundException, ValidationException
from orderflow.domains.ordering.application.ports import IUnitOfWork
from orderflow.domains.ordering.application.services import StockLedger
from orderflow.domains.ordering.domain.entities import Order, OrderItem
from orderflow.domains.ordering.domain.exceptions import EmptyOrderException

from .base import OrderingUseCase, UseCaseResponse

logger = logging.getLogger(__name__)


@dataclass
class OrderItemInput:
    """Input for order item."""

    product_id: int
    quantity: int


@dataclass
class CreateOrderRequest:
    """Request for creating an order."""

    user_id: int
    items: list[OrderItemInput] = field(default_factory=list)
    shipping_address: str | None = None


@dataclass
class CreateOrderResponse(UseCaseResponse):
    """Response from order creation."""

    order: Order | None = None
    order_id: int | None = None
    total_amount: Decimal | None = None


class CreateOrderUseCase(OrderingUseCase):
    """
    Use Case: Create Order

    Responsibilities:
    - Validate the request (non-empty, quantity bounds, address length)
    - Per item, in request order: product exists, is active, has stock
    - Snapshot unit prices and compute the total
    - Decrement stock through the ledger
    - Persist the order as Pending

    Any failure discards the unit of work, so no stock taken for earlier
    items survives.
    """

    def __init__(self, *args, ledger: StockLedger | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.ledger = ledger or StockLedger()

    async def execute(self, request: CreateOrderRequest) -> CreateOrderResponse:
        """
        Create a new order.

        Args:
            request: Order creation request

        Returns:
            CreateOrderResponse with the created order or the failure
        """
        response = CreateOrderResponse()
        try:
            self._validate_request(request)
            now = self.clock()

            async with self.uow_factory() as uow:
                items = await self._assemble_items(uow, request.items, now)
                order = Order.create(
                    user_id=request.user_id,
                    items=items,
                    shipping_address=request.shipping_address,
                    now=now,
                )
                await uow.orders.add(order)
                await uow.commit()

        except DomainException as e:
            logger.info(f"Order for user {request.user_id} rejected: {e.message}")
            return response.fail_with(e)
        except Exception as e:
            logger.error(f"Error creating order for user {request.user_id}: {e}", exc_info=True)
            raise

        logger.info(f"Order {order.id} created for user {request.user_id}: total {order.total_amount}")
        await self._invalidate_reports()
        await self._notify_status(order.user_id, order.id, order.status.value)

        response.success = True
        response.order = order
        response.order_id = order.id
        response.total_amount = order.total_amount.amount
        return response

    def _validate_request(self, request: CreateOrderRequest) -> None:
        if not request.items:
            raise EmptyOrderException()

        max_quantity = self.settings.MAX_ITEM_QUANTITY
        for index, item in enumerate(request.items):
            if item.quantity <= 0:
                raise ValidationException(
                    "Quantity must be greater than 0",
                    field=f"items[{index}].quantity",
                    details={"product_id": item.product_id},
                )
            if item.quantity > max_quantity:
                raise ValidationException(
                    f"Quantity cannot exceed {max_quantity}",
                    field=f"items[{index}].quantity",
                    details={"product_id": item.product_id},
                )

        max_length = self.settings.SHIPPING_ADDRESS_MAX_LENGTH
        if request.shipping_address is not None and len(request.shipping_address) > max_length:
            raise ValidationException(
                f"Shipping address cannot exceed {max_length} characters",
                field="shipping_address",
            )

    async def _assemble_items(
        self,
        uow: IUnitOfWork,
        requested: list[OrderItemInput],
        now: datetime,
    ) -> list[OrderItem]:
        items: list[OrderItem] = []
        for requested_item in requested:
            product = await uow.products.get_by_id(requested_item.product_id)
            if product is None:
                raise EntityNotFoundException("Product", requested_item.product_id)

            product.ensure_orderable(requested_item.quantity)

            items.append(
                OrderItem(
                    product_id=product.id,
                    quantity=requested_item.quantity,
                    unit_price=product.price,
                    product_name=product.name,
                )
            )
            await self.ledger.adjust(uow, product.id, -requested_item.quantity, now)
        return items
