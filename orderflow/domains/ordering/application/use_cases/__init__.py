"""
Ordering Use Cases
"""

from .adjust_stock import AdjustStockRequest, AdjustStockResponse, AdjustStockUseCase
from .base import OrderingUseCase, UseCaseResponse
from .create_order import CreateOrderRequest, CreateOrderResponse, CreateOrderUseCase, OrderItemInput
from .order_queries import (
    GetOrderResponse,
    GetOrderUseCase,
    ListOrdersRequest,
    ListOrdersResponse,
    ListOrdersUseCase,
)
from .order_statistics import GetOrderStatisticsUseCase, OrderStatisticsRequest, OrderStatisticsResponse
from .product_management import (
    CreateProductRequest,
    CreateProductUseCase,
    DeleteProductUseCase,
    ProductListResponse,
    ProductQueriesUseCase,
    ProductResponse,
    SetProductActiveUseCase,
    UpdateProductRequest,
    UpdateProductUseCase,
)
from .transition_order_status import (
    CancelOrderRequest,
    CancelOrderUseCase,
    TransitionOrderStatusRequest,
    TransitionOrderStatusResponse,
    TransitionOrderStatusUseCase,
)

__all__ = [
    "UseCaseResponse",
    "OrderingUseCase",
    # Stock
    "AdjustStockRequest",
    "AdjustStockResponse",
    "AdjustStockUseCase",
    # Orders
    "OrderItemInput",
    "CreateOrderRequest",
    "CreateOrderResponse",
    "CreateOrderUseCase",
    "TransitionOrderStatusRequest",
    "TransitionOrderStatusResponse",
    "TransitionOrderStatusUseCase",
    "CancelOrderRequest",
    "CancelOrderUseCase",
    "GetOrderResponse",
    "GetOrderUseCase",
    "ListOrdersRequest",
    "ListOrdersResponse",
    "ListOrdersUseCase",
    # Reporting
    "OrderStatisticsRequest",
    "OrderStatisticsResponse",
    "GetOrderStatisticsUseCase",
    # Products
    "CreateProductRequest",
    "UpdateProductRequest",
    "ProductResponse",
    "ProductListResponse",
    "CreateProductUseCase",
    "UpdateProductUseCase",
    "SetProductActiveUseCase",
    "DeleteProductUseCase",
    "ProductQueriesUseCase",
]
