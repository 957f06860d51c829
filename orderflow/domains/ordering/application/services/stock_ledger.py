"""
Stock Ledger

The only entry point for changing a product's stock.
"""

import logging
from datetime import datetime

from orderflow.core.domain import EntityNotFoundException, InsufficientStockException, utc_now
from orderflow.domains.ordering.application.ports import IUnitOfWork

logger = logging.getLogger(__name__)


class StockLedger:
    """
    Applies stock deltas inside a caller-owned unit of work.

    The repository performs check and write as one conditional statement,
    so two adjustments of the same product can never both pass a check that
    only one of them satisfies.
    """

    async def adjust(
        self,
        uow: IUnitOfWork,
        product_id: int,
        delta: int,
        now: datetime | None = None,
    ) -> int:
        """
        Apply `stock += delta`.

        Returns:
            The new stock level

        Raises:
            EntityNotFoundException: If the product does not exist
            InsufficientStockException: If the result would be negative;
                nothing is changed
        """
        new_stock = await uow.products.adjust_stock(product_id, delta, now or utc_now())
        if new_stock is not None:
            logger.debug(f"Stock of product {product_id} adjusted by {delta:+d} to {new_stock}")
            return new_stock

        product = await uow.products.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundException("Product", product_id)
        raise InsufficientStockException(
            product_id=product_id,
            requested=-delta,
            available=product.stock_quantity,
            product_name=product.name,
        )
