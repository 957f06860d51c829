"""
Tests for product management and catalog queries.
"""

from decimal import Decimal

import pytest

from orderflow.core.domain import ErrorKind
from orderflow.domains.ordering.application.use_cases import CreateProductRequest, UpdateProductRequest


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_product_validation(container):
    use_case = container.create_product_use_case()

    negative_stock = await use_case.execute(CreateProductRequest(name="Widget", price="1.00", stock=-1))
    bad_price = await use_case.execute(CreateProductRequest(name="Widget", price="abc"))
    no_name = await use_case.execute(CreateProductRequest(name="  ", price="1.00"))

    assert negative_stock.details["field"] == "stock"
    assert bad_price.details["field"] == "price"
    assert no_name.error_kind == ErrorKind.VALIDATION_FAILURE.value


@pytest.mark.integration
@pytest.mark.asyncio
async def test_update_keeps_stock(container, make_product, stock_of):
    product = await make_product(name="Widget", price="10.00", stock=7)

    response = await container.update_product_use_case().execute(
        UpdateProductRequest(product_id=product.id, name="Widget Pro", price=Decimal("12.50"))
    )

    assert response.success
    stored = (await container.product_queries_use_case().get(product.id)).product
    assert stored.name == "Widget Pro"
    assert stored.price.amount == Decimal("12.50")
    assert await stock_of(product.id) == 7


@pytest.mark.integration
@pytest.mark.asyncio
async def test_deactivated_product_cannot_be_ordered(container, make_product, place_order):
    product = await make_product(stock=5)

    await container.set_product_active_use_case().execute(product.id, False)
    rejected = await place_order((product.id, 1))
    await container.set_product_active_use_case().execute(product.id, True)
    accepted = await place_order((product.id, 1))

    assert rejected.error_code == "PRODUCT_INACTIVE"
    assert accepted.success


@pytest.mark.integration
@pytest.mark.asyncio
async def test_delete_unreferenced_product(container, make_product):
    product = await make_product()

    response = await container.delete_product_use_case().execute(product.id)

    assert response.success
    missing = await container.product_queries_use_case().get(product.id)
    assert missing.error_kind == ErrorKind.NOT_FOUND.value


@pytest.mark.integration
@pytest.mark.asyncio
async def test_delete_referenced_product_is_refused(container, make_product, place_order):
    product = await make_product(stock=5)
    order_id = (await place_order((product.id, 1))).order_id

    response = await container.delete_product_use_case().execute(product.id)

    assert response.error_code == "PRODUCT_IN_USE"
    assert response.error_kind == ErrorKind.INVALID_STATE.value
    order = (await container.get_order_use_case().execute(order_id)).order
    assert order.items[0].product_id == product.id


@pytest.mark.integration
@pytest.mark.asyncio
async def test_low_stock_query(container, make_product):
    await make_product(name="Five", stock=5)
    await make_product(name="Zero", stock=0)
    await make_product(name="Many", stock=500)
    await make_product(name="Hidden", stock=1, is_active=False)
    queries = container.product_queries_use_case()

    default = await queries.low_stock()
    strict = await queries.low_stock(threshold=0)
    invalid = await queries.low_stock(threshold=-1)

    assert [p.name for p in default.products] == ["Zero", "Five"]
    assert [p.name for p in strict.products] == ["Zero"]
    assert invalid.error_kind == ErrorKind.VALIDATION_FAILURE.value


@pytest.mark.integration
@pytest.mark.asyncio
async def test_in_stock_query(container, make_product):
    await make_product(name="Banana", stock=2)
    await make_product(name="Apple", stock=1)
    await make_product(name="Sold Out", stock=0)
    await make_product(name="Hidden", stock=9, is_active=False)

    response = await container.product_queries_use_case().in_stock()

    assert [p.name for p in response.products] == ["Apple", "Banana"]
