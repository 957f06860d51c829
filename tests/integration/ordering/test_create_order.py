"""
Tests for CreateOrderUseCase: assembly, stock reservation and atomicity.
"""

import asyncio
from decimal import Decimal

import pytest

from orderflow.core.domain import ErrorKind
from orderflow.domains.ordering.application.use_cases import (
    CreateOrderRequest,
    ListOrdersRequest,
    UpdateProductRequest,
)
from orderflow.domains.ordering.domain import OrderStatus


@pytest.mark.integration
@pytest.mark.asyncio
async def test_order_reserves_stock_and_snapshots_price(container, make_product, place_order, stock_of):
    product = await make_product(price="10.00", stock=10)

    response = await place_order((product.id, 3))

    assert response.success
    order = response.order
    assert order.status is OrderStatus.PENDING
    assert len(order.items) == 1
    assert order.items[0].quantity == 3
    assert order.items[0].unit_price.amount == Decimal("10.00")
    assert response.total_amount == Decimal("30.00")
    assert await stock_of(product.id) == 7


@pytest.mark.integration
@pytest.mark.asyncio
async def test_exact_stock_succeeds_and_one_more_fails(make_product, place_order, stock_of):
    product = await make_product(stock=4)

    too_many = await place_order((product.id, 5))
    assert not too_many.success
    assert too_many.error_kind == ErrorKind.INSUFFICIENT_STOCK.value
    assert too_many.details["available"] == 4
    assert await stock_of(product.id) == 4

    exact = await place_order((product.id, 4))
    assert exact.success
    assert await stock_of(product.id) == 0


@pytest.mark.integration
@pytest.mark.asyncio
async def test_sold_out_scenario(make_product, place_order, stock_of):
    product = await make_product(price="10.00", stock=5)

    first = await place_order((product.id, 5), user_id=1)
    second = await place_order((product.id, 1), user_id=2)

    assert first.success and first.total_amount == Decimal("50.00")
    assert not second.success
    assert second.error_kind == ErrorKind.INSUFFICIENT_STOCK.value
    assert second.details["product_id"] == product.id
    assert await stock_of(product.id) == 0


@pytest.mark.integration
@pytest.mark.asyncio
async def test_failing_item_rolls_back_earlier_reservations(container, make_product, place_order, stock_of):
    plenty = await make_product(name="Plenty", stock=5)
    scarce = await make_product(name="Scarce", stock=1)

    response = await place_order((plenty.id, 2), (scarce.id, 3))

    assert not response.success
    assert response.error_kind == ErrorKind.INSUFFICIENT_STOCK.value
    assert await stock_of(plenty.id) == 5
    assert await stock_of(scarce.id) == 1
    listing = await container.list_orders_use_case().execute(ListOrdersRequest())
    assert listing.total_count == 0


@pytest.mark.integration
@pytest.mark.asyncio
async def test_missing_and_inactive_products(make_product, place_order, stock_of):
    active = await make_product(name="Active", stock=5)
    retired = await make_product(name="Retired", stock=5, is_active=False)

    missing = await place_order((active.id, 1), (9999, 1))
    inactive = await place_order((active.id, 1), (retired.id, 1))

    assert missing.error_kind == ErrorKind.NOT_FOUND.value
    assert inactive.error_kind == ErrorKind.INVALID_STATE.value
    assert inactive.error_code == "PRODUCT_INACTIVE"
    assert await stock_of(active.id) == 5


@pytest.mark.integration
@pytest.mark.asyncio
async def test_request_validation(container, make_product, place_order):
    product = await make_product(stock=5000)

    empty = await container.create_order_use_case().execute(CreateOrderRequest(user_id=1, items=[]))
    zero = await place_order((product.id, 0))
    huge = await place_order((product.id, 1001))
    long_address = await place_order((product.id, 1), shipping_address="x" * 501)

    assert empty.error_kind == ErrorKind.VALIDATION_FAILURE.value
    assert zero.error_kind == ErrorKind.VALIDATION_FAILURE.value
    assert huge.error_kind == ErrorKind.VALIDATION_FAILURE.value
    assert long_address.details["field"] == "shipping_address"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_same_product_twice_checks_remaining_stock(make_product, place_order, stock_of):
    product = await make_product(stock=5)

    response = await place_order((product.id, 3), (product.id, 3))

    assert response.error_kind == ErrorKind.INSUFFICIENT_STOCK.value
    assert response.details["available"] == 2
    assert await stock_of(product.id) == 5


@pytest.mark.integration
@pytest.mark.asyncio
async def test_total_survives_later_price_change(container, make_product, place_order):
    product = await make_product(price="10.00", stock=10)
    placed = await place_order((product.id, 2))

    await container.update_product_use_case().execute(UpdateProductRequest(product_id=product.id, price="99.00"))
    reloaded = await container.get_order_use_case().execute(placed.order_id)

    order = reloaded.order
    assert order.total_amount.amount == Decimal("20.00")
    assert order.items[0].unit_price.amount == Decimal("10.00")
    assert sum(i.total_price.amount for i in order.items) == order.total_amount.amount


@pytest.mark.integration
@pytest.mark.asyncio
async def test_creation_notifies_pending_status(make_product, place_order, mock_notifier):
    product = await make_product()

    response = await place_order((product.id, 1), user_id=42)

    mock_notifier.notify_order_status_changed.assert_awaited_once_with(42, response.order_id, "Pending")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_notification_failure_does_not_fail_the_order(make_product, place_order, mock_notifier, stock_of):
    mock_notifier.notify_order_status_changed.side_effect = RuntimeError("hub offline")
    product = await make_product(stock=2)

    response = await place_order((product.id, 2))

    assert response.success
    assert await stock_of(product.id) == 0


CONTENDED_FAILURES = {ErrorKind.INSUFFICIENT_STOCK.value, ErrorKind.CONCURRENCY_CONFLICT.value}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_concurrent_orders_never_oversell(container, make_product, place_order, stock_of):
    widget = await make_product(name="Widget", stock=10)
    gadget = await make_product(name="Gadget", stock=6)
    baskets = [
        [(widget.id, 1)],
        [(widget.id, 2), (gadget.id, 1)],
        [(gadget.id, 2), (widget.id, 1)],
        [(gadget.id, 3)],
        [(widget.id, 4)],
    ] * 4

    responses = await asyncio.gather(*(place_order(*basket, user_id=n) for n, basket in enumerate(baskets)))

    succeeded = [(basket, r) for basket, r in zip(baskets, responses) if r.success]
    rejected = [r for r in responses if not r.success]
    assert succeeded
    assert all(r.error_kind in CONTENDED_FAILURES for r in rejected)

    taken = {widget.id: 0, gadget.id: 0}
    for basket, _ in succeeded:
        for product_id, quantity in basket:
            taken[product_id] += quantity
    assert taken[widget.id] <= 10
    assert taken[gadget.id] <= 6
    assert await stock_of(widget.id) == 10 - taken[widget.id]
    assert await stock_of(gadget.id) == 6 - taken[gadget.id]

    listing = await container.list_orders_use_case().execute(ListOrdersRequest(page_size=100))
    assert sorted(o.id for o in listing.orders) == sorted(r.order_id for _, r in succeeded)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_concurrent_sold_out_scenario(make_product, place_order, stock_of):
    product = await make_product(stock=5)

    whole, single = await asyncio.gather(
        place_order((product.id, 5), user_id=1),
        place_order((product.id, 1), user_id=2),
    )

    assert not (whole.success and single.success)
    for response in (whole, single):
        if not response.success:
            assert response.error_kind in CONTENDED_FAILURES
    sold = (5 if whole.success else 0) + (1 if single.success else 0)
    assert await stock_of(product.id) == 5 - sold
