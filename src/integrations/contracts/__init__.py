from .catalog import (
    Category,
    Product,
    coerce_features,
    coerce_license_years,
    coerce_price,
    slugify,
)
from .orders import CartLine, Customer, Order, make_cart_id, order_amount

__all__ = [
    # catalog
    "Category", "Product", "coerce_features", "coerce_license_years", "coerce_price", "slugify",
    # orders
    "CartLine", "Customer", "Order", "make_cart_id", "order_amount",
]
