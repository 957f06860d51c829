"""
Tests for order read access.
"""

import pytest
import pytest_asyncio

from orderflow.core.domain import ErrorKind
from orderflow.domains.ordering.application.use_cases import ListOrdersRequest, TransitionOrderStatusRequest


@pytest_asyncio.fixture
async def three_orders(make_product, place_order, clock):
    product = await make_product(stock=100)
    ids = []
    for user_id in (1, 2, 1):
        ids.append((await place_order((product.id, 1), user_id=user_id)).order_id)
        clock.advance(minutes=1)
    return ids


@pytest.mark.integration
@pytest.mark.asyncio
async def test_get_order_without_items(container, three_orders):
    with_items = await container.get_order_use_case().execute(three_orders[0])
    header_only = await container.get_order_use_case().execute(three_orders[0], with_items=False)

    assert len(with_items.order.items) == 1
    assert header_only.order.items == []
    assert header_only.order.total_amount == with_items.order.total_amount


@pytest.mark.integration
@pytest.mark.asyncio
async def test_get_missing_order(container):
    response = await container.get_order_use_case().execute(999)

    assert response.error_kind == ErrorKind.NOT_FOUND.value


@pytest.mark.integration
@pytest.mark.asyncio
async def test_orders_by_user_newest_first(container, three_orders):
    response = await container.list_orders_use_case().execute(ListOrdersRequest(user_id=1))

    assert [o.id for o in response.orders] == [three_orders[2], three_orders[0]]
    assert response.total_count == 2


@pytest.mark.integration
@pytest.mark.asyncio
async def test_orders_by_status(container, three_orders):
    await container.transition_order_status_use_case().execute(
        TransitionOrderStatusRequest(order_id=three_orders[1], status="Shipped")
    )
    use_case = container.list_orders_use_case()

    shipped = await use_case.execute(ListOrdersRequest(status="shipped"))
    invalid = await use_case.execute(ListOrdersRequest(status="Lost"))

    assert [o.id for o in shipped.orders] == [three_orders[1]]
    assert invalid.error_kind == ErrorKind.INVALID_STATE.value


@pytest.mark.integration
@pytest.mark.asyncio
async def test_paging_is_clamped(container, three_orders):
    use_case = container.list_orders_use_case()

    first = await use_case.execute(ListOrdersRequest(page=0, page_size=2))
    second = await use_case.execute(ListOrdersRequest(page=2, page_size=2))
    oversized = await use_case.execute(ListOrdersRequest(page_size=10_000))

    assert first.page == 1
    assert [o.id for o in first.orders] == [three_orders[2], three_orders[1]]
    assert first.total_pages == 2
    assert [o.id for o in second.orders] == [three_orders[0]]
    assert oversized.page_size == 100


@pytest.mark.integration
@pytest.mark.asyncio
async def test_recent_orders(container, three_orders):
    recent = await container.list_orders_use_case().recent(limit=2)

    assert [o.id for o in recent] == [three_orders[2], three_orders[1]]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_filtered_listing_is_paged(container, make_product, place_order, clock):
    product = await make_product(stock=100)
    pending = []
    for _ in range(5):
        pending.append((await place_order((product.id, 1), user_id=9)).order_id)
        clock.advance(minutes=1)
    await place_order((product.id, 1), user_id=3)
    use_case = container.list_orders_use_case()

    by_status = await use_case.execute(ListOrdersRequest(status="Pending", page=2, page_size=2))
    by_user = await use_case.execute(ListOrdersRequest(user_id=9, page=3, page_size=2))

    assert [o.id for o in by_status.orders] == [pending[3], pending[2]]
    assert by_status.total_count == 6
    assert by_status.total_pages == 3
    assert [o.id for o in by_user.orders] == [pending[0]]
    assert by_user.total_count == 5
