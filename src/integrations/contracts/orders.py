"""
Order contracts.

An Order is never stored: it is assembled from the checkout form and the
cart, then forwarded to the notification channels.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CartLine:
    product_id: str
    name: str
    price: float
    qty: int = 1
    license_years: int = 1

    @property
    def cart_id(self) -> str:
        return make_cart_id(self.product_id, self.license_years)

    @property
    def subtotal(self) -> float:
        return self.price * self.qty

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cartId": self.cart_id,
            "productId": self.product_id,
            "name": self.name,
            "price": self.price,
            "qty": self.qty,
            "licenseYears": self.license_years,
        }


@dataclass
class Customer:
    first_name: str
    last_name: str
    email: str
    country: str = ""
    city: str = ""
    address: str = ""
    postcode: str = ""
    phone: Optional[str] = None
    note: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Order:
    customer: Customer
    items: List[CartLine] = field(default_factory=list)
    total: float = 0.0
    paypal_order_id: Optional[str] = None


def make_cart_id(product_id: str, license_years: int) -> str:
    return f"{product_id}-{license_years}"


def order_amount(items: List[Dict[str, Any]]) -> float:
    """
    Sum price x qty over raw line items.

    A missing or zero qty counts as 1; values that are not numbers count as 0.
    """
    amount = 0.0
    for item in items or []:
        amount += _number(item.get("price"), 0.0) * _number(item.get("qty"), 1.0)
    return amount


def _number(value: Any, default: float) -> float:
    if not value:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
