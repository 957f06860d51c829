"""
Tests for order status transitions, cancellation restock and terminality.
"""

import pytest

from orderflow.core.domain import ConcurrencyException, ErrorKind
from orderflow.domains.ordering.application.services import OrderLifecycle
from orderflow.domains.ordering.application.use_cases import CancelOrderRequest, TransitionOrderStatusRequest
from orderflow.domains.ordering.domain import OrderStatus


async def _transition(container, order_id, status):
    return await container.transition_order_status_use_case().execute(
        TransitionOrderStatusRequest(order_id=order_id, status=status)
    )


@pytest.mark.integration
@pytest.mark.asyncio
async def test_forward_path_to_delivered(container, make_product, place_order, clock):
    product = await make_product(stock=5)
    order_id = (await place_order((product.id, 1))).order_id

    processing = await _transition(container, order_id, "Processing")
    shipped = await _transition(container, order_id, OrderStatus.SHIPPED)
    clock.advance(days=2)
    delivered = await _transition(container, order_id, "delivered")

    assert processing.previous_status == "Pending" and processing.status == "Processing"
    assert shipped.previous_status == "Processing"
    assert delivered.status == "Delivered"
    assert delivered.order.completed_at == clock.now

    stored = (await container.get_order_use_case().execute(order_id)).order
    assert stored.status is OrderStatus.DELIVERED
    assert stored.completed_at == clock.now
    assert stored.version == 3


@pytest.mark.integration
@pytest.mark.asyncio
async def test_steps_may_be_skipped(container, make_product, place_order):
    product = await make_product(stock=5)
    order_id = (await place_order((product.id, 1))).order_id

    response = await _transition(container, order_id, "Delivered")

    assert response.success
    assert response.previous_status == "Pending"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_backward_transition_rejected(container, make_product, place_order):
    product = await make_product(stock=5)
    order_id = (await place_order((product.id, 1))).order_id
    await _transition(container, order_id, "Shipped")

    response = await _transition(container, order_id, "Processing")

    assert not response.success
    assert response.error_code == "INVALID_TRANSITION"
    assert response.error_kind == ErrorKind.INVALID_STATE.value


@pytest.mark.integration
@pytest.mark.asyncio
async def test_cancel_restores_stock_round_trip(container, make_product, place_order, stock_of, mock_notifier):
    product = await make_product(stock=10)
    order_id = (await place_order((product.id, 3))).order_id
    assert await stock_of(product.id) == 7

    response = await container.cancel_order_use_case().execute(CancelOrderRequest(order_id=order_id))

    assert response.success
    assert response.status == "Cancelled"
    assert await stock_of(product.id) == 10
    mock_notifier.notify_order_status_changed.assert_awaited_with(1, order_id, "Cancelled")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_cancel_restores_every_item(container, make_product, place_order, stock_of):
    first = await make_product(name="First", stock=4)
    second = await make_product(name="Second", stock=6)
    order_id = (await place_order((first.id, 4), (second.id, 2))).order_id

    await container.cancel_order_use_case().execute(CancelOrderRequest(order_id=order_id))

    assert await stock_of(first.id) == 4
    assert await stock_of(second.id) == 6


@pytest.mark.integration
@pytest.mark.asyncio
async def test_cancel_restocks_inactive_product(container, make_product, place_order, stock_of):
    product = await make_product(stock=2)
    order_id = (await place_order((product.id, 2))).order_id
    await container.set_product_active_use_case().execute(product.id, False)

    response = await container.cancel_order_use_case().execute(CancelOrderRequest(order_id=order_id))

    assert response.success
    assert await stock_of(product.id) == 2


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.parametrize("terminal", ["Cancelled", "Delivered"])
@pytest.mark.parametrize("target", ["Pending", "Processing", "Shipped", "Delivered", "Cancelled"])
async def test_terminal_orders_never_change(container, make_product, place_order, stock_of, clock, terminal, target):
    product = await make_product(stock=10)
    order_id = (await place_order((product.id, 3))).order_id
    await _transition(container, order_id, terminal)
    before = (await container.get_order_use_case().execute(order_id)).order
    stock_before = await stock_of(product.id)
    clock.advance(hours=1)

    response = await _transition(container, order_id, target)

    after = (await container.get_order_use_case().execute(order_id)).order
    assert not response.success
    assert response.error_kind == ErrorKind.INVALID_STATE.value
    assert after.status == before.status
    assert after.completed_at == before.completed_at
    assert after.version == before.version
    assert await stock_of(product.id) == stock_before


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unknown_status_value(container, make_product, place_order):
    product = await make_product(stock=5)
    order_id = (await place_order((product.id, 1))).order_id

    response = await _transition(container, order_id, "Teleported")

    assert response.error_kind == ErrorKind.INVALID_STATE.value
    assert response.error_code == "INVALID_STATUS"
    assert "Pending" in response.details["allowed"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unknown_order(container):
    response = await _transition(container, 12345, "Shipped")

    assert response.error_kind == ErrorKind.NOT_FOUND.value


@pytest.mark.integration
@pytest.mark.asyncio
async def test_stale_version_is_a_conflict(container, make_product, place_order, stock_of):
    product = await make_product(stock=5)
    order_id = (await place_order((product.id, 2))).order_id

    async with container.uow_factory() as stale_uow:
        stale = await stale_uow.orders.get_by_id(order_id)

        await _transition(container, order_id, "Processing")

        expected_version = stale.version
        stale.transition_to(OrderStatus.SHIPPED)
        with pytest.raises(ConcurrencyException) as exc_info:
            await stale_uow.orders.update_status(stale, expected_version)

    assert exc_info.value.kind is ErrorKind.CONCURRENCY_CONFLICT
    stored = (await container.get_order_use_case().execute(order_id)).order
    assert stored.status is OrderStatus.PROCESSING


@pytest.mark.integration
@pytest.mark.asyncio
async def test_require_status_skips_moved_orders(container, make_product, place_order, stock_of):
    product = await make_product(stock=5)
    order_id = (await place_order((product.id, 2))).order_id
    await _transition(container, order_id, "Processing")

    async with container.uow_factory() as uow:
        result = await OrderLifecycle().transition(
            uow, order_id, OrderStatus.CANCELLED, require_status=OrderStatus.PENDING
        )
        await uow.commit()

    assert result is None
    assert await stock_of(product.id) == 3
