"""
Product Management Use Cases

Create, update, activate/deactivate and delete products, plus the catalog
reads (in stock, low stock). Stock itself only moves through the ledger.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Callable

from orderflow.config.settings import Settings, get_settings
from orderflow.core.domain import (
    DomainException,
    EntityNotFoundException,
    Money,
    Quantity,
    ValidationException,
)
from orderflow.domains.ordering.application.ports import IUnitOfWork
from orderflow.domains.ordering.domain.entities import Product
from orderflow.domains.ordering.domain.exceptions import ProductInUseException

from .base import OrderingUseCase, UseCaseResponse

logger = logging.getLogger(__name__)


def _to_money(value: Decimal | int | float | str) -> Money:
    try:
        return Money.of(value)
    except (InvalidOperation, ValueError) as e:
        raise ValidationException(f"Invalid price: {value}", field="price") from e


@dataclass
class CreateProductRequest:
    name: str
    price: Decimal | int | float | str
    stock: int = 0
    description: str | None = None
    is_active: bool = True


@dataclass
class UpdateProductRequest:
    """Fields left as None are unchanged."""

    product_id: int
    name: str | None = None
    description: str | None = None
    price: Decimal | int | float | str | None = None


@dataclass
class ProductResponse(UseCaseResponse):
    product: Product | None = None


@dataclass
class ProductListResponse(UseCaseResponse):
    products: list[Product] = field(default_factory=list)


class CreateProductUseCase(OrderingUseCase):
    """Use Case: Create Product"""

    async def execute(self, request: CreateProductRequest) -> ProductResponse:
        response = ProductResponse()
        try:
            if request.stock < 0:
                raise ValidationException("Stock cannot be negative", field="stock")
            now = self.clock()
            product = Product(
                name=request.name.strip() if request.name else "",
                description=request.description,
                price=_to_money(request.price),
                stock=Quantity(request.stock),
                is_active=request.is_active,
                created_at=now,
                updated_at=now,
            )
            async with self.uow_factory() as uow:
                await uow.products.add(product)
                await uow.commit()
        except DomainException as e:
            return response.fail_with(e)

        logger.info(f"Product {product.id} created: {product.name}")
        await self._invalidate_reports()
        response.success = True
        response.product = product
        return response


class UpdateProductUseCase(OrderingUseCase):
    """
    Use Case: Update Product

    Price changes apply to future orders only; existing order items keep
    their snapshot.
    """

    async def execute(self, request: UpdateProductRequest) -> ProductResponse:
        response = ProductResponse()
        try:
            async with self.uow_factory() as uow:
                product = await _load_product(uow, request.product_id)
                product.update_details(name=request.name, description=request.description)
                if request.price is not None:
                    product.change_price(_to_money(request.price))
                await uow.products.save(product)
                await uow.commit()
        except DomainException as e:
            return response.fail_with(e)

        await self._invalidate_reports()
        response.success = True
        response.product = product
        return response


class SetProductActiveUseCase(OrderingUseCase):
    """Use Case: Activate / Deactivate Product"""

    async def execute(self, product_id: int, active: bool) -> ProductResponse:
        response = ProductResponse()
        try:
            async with self.uow_factory() as uow:
                product = await _load_product(uow, product_id)
                if active:
                    product.activate()
                else:
                    product.deactivate()
                await uow.products.save(product)
                await uow.commit()
        except DomainException as e:
            return response.fail_with(e)

        logger.info(f"Product {product_id} {'activated' if active else 'deactivated'}")
        await self._invalidate_reports()
        response.success = True
        response.product = product
        return response


class DeleteProductUseCase(OrderingUseCase):
    """
    Use Case: Delete Product

    Fails with InvalidState while any order item references the product;
    deactivate it instead.
    """

    async def execute(self, product_id: int) -> ProductResponse:
        response = ProductResponse()
        try:
            async with self.uow_factory() as uow:
                product = await _load_product(uow, product_id)
                if await uow.products.is_referenced(product_id):
                    raise ProductInUseException(product_id)
                await uow.products.delete(product_id)
                await uow.commit()
        except DomainException as e:
            return response.fail_with(e)

        logger.info(f"Product {product_id} deleted")
        await self._invalidate_reports()
        response.success = True
        response.product = product
        return response


class ProductQueriesUseCase:
    """Use Case: Catalog reads"""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork], settings: Settings | None = None):
        self.uow_factory = uow_factory
        self.settings = settings or get_settings()

    async def get(self, product_id: int) -> ProductResponse:
        response = ProductResponse()
        try:
            async with self.uow_factory() as uow:
                product = await _load_product(uow, product_id)
        except DomainException as e:
            return response.fail_with(e)

        response.success = True
        response.product = product
        return response

    async def low_stock(self, threshold: int | None = None) -> ProductListResponse:
        """Active products at or below the threshold, lowest stock first."""
        if threshold is None:
            threshold = self.settings.LOW_STOCK_THRESHOLD
        response = ProductListResponse()
        if threshold < 0:
            return response.fail_with(ValidationException("Threshold cannot be negative", field="threshold"))

        async with self.uow_factory() as uow:
            response.products = await uow.products.find_low_stock(threshold)
        response.success = True
        return response

    async def in_stock(self, limit: int = 100, offset: int = 0) -> ProductListResponse:
        response = ProductListResponse()
        async with self.uow_factory() as uow:
            response.products = await uow.products.find_in_stock(limit=max(1, limit), offset=max(0, offset))
        response.success = True
        return response


async def _load_product(uow: IUnitOfWork, product_id: int) -> Product:
    product = await uow.products.get_by_id(product_id)
    if product is None:
        raise EntityNotFoundException("Product", product_id)
    return product
