"""
Orders services package - service layer for the order lifecycle.

- OrderService: Order creation and the order status graph
- OrderItemService: Adding and removing items, item preparation status
- OrderCalculationService: Subtotal, discount, tax and total recalculation
- OrderDiscountService: Manual discounts and bundle savings
- KitchenService: Station queues and tickets
"""

# Core order operations
from .order_service import OrderService

# Calculation operations
from .calculation_service import OrderCalculationService

# Item management
from .item_service import OrderItemService

# Discount operations
from .discount_service import OrderDiscountService

# Kitchen operations
from .kitchen_service import KitchenService

__all__ = [
    'OrderService',
    'OrderCalculationService',
    'OrderItemService',
    'OrderDiscountService',
    'KitchenService',
]
