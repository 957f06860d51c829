"""
Adjust Stock Use Case

Administrative restock or write-off through the stock ledger.
"""

import logging
from dataclasses import dataclass

from orderflow.core.domain import DomainException
from orderflow.domains.ordering.application.services import StockLedger

from .base import OrderingUseCase, UseCaseResponse

logger = logging.getLogger(__name__)


@dataclass
class AdjustStockRequest:
    product_id: int
    delta: int


@dataclass
class AdjustStockResponse(UseCaseResponse):
    product_id: int | None = None
    new_stock: int | None = None


class AdjustStockUseCase(OrderingUseCase):
    """
    Use Case: Adjust Stock

    Applies `stock += delta` atomically; fails with InsufficientStock and no
    change when the result would be negative.
    """

    def __init__(self, *args, ledger: StockLedger | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.ledger = ledger or StockLedger()

    async def execute(self, request: AdjustStockRequest) -> AdjustStockResponse:
        response = AdjustStockResponse(product_id=request.product_id)
        try:
            async with self.uow_factory() as uow:
                new_stock = await self.ledger.adjust(uow, request.product_id, request.delta, self.clock())
                await uow.commit()
        except DomainException as e:
            logger.info(f"Stock adjustment of product {request.product_id} rejected: {e.message}")
            return response.fail_with(e)
        except Exception as e:
            logger.error(f"Error adjusting stock of product {request.product_id}: {e}", exc_info=True)
            raise

        await self._invalidate_reports()
        response.success = True
        response.new_stock = new_stock
        return response
