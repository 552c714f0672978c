"""
In-memory shopping cart.

Lines are keyed by product id plus the selected license duration, so the
same product bought with a different license length becomes a separate
line. The total is always recomputed from the current lines.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.integrations.contracts.catalog import Product, first_license_option
from src.integrations.contracts.orders import CartLine, make_cart_id


class Cart:
    def __init__(self) -> None:
        self._lines: Dict[str, CartLine] = {}

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def total(self) -> float:
        return sum(line.subtotal for line in self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def add(self, product: Product, license_years: Optional[int] = None, qty: Optional[int] = None) -> CartLine:
        """
        Add ``qty`` (default 1) of ``product`` with the chosen license length.

        A license length the product does not offer falls back to its first option.
        """
        years = _license_years(product, license_years)
        count = _positive_int(qty) or 1
        cart_id = make_cart_id(product.id, years)

        line = self._lines.get(cart_id)
        if line is not None:
            line.qty += count
            return line

        line = CartLine(product_id=product.id, name=product.name, price=product.price, qty=count, license_years=years)
        self._lines[cart_id] = line
        return line

    def remove(self, cart_id: str) -> None:
        self._lines.pop(cart_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def to_items(self) -> List[Dict[str, Any]]:
        return [line.to_dict() for line in self._lines.values()]


def _positive_int(value: Any) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _license_years(product: Product, requested: Any) -> int:
    years = _positive_int(requested)
    if years is not None and years in product.license_options_years:
        return years
    return first_license_option(product)
