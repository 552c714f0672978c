"""
Public catalog renderer.

Pure presentation over fetched categories/products: keeps the selected
product and the cart, and renders HTML fragments for the catalog grid, the
product detail panel and the order summary from the Jinja2 templates in
src/storefront/templates. Every mutation returns the whole freshly rendered
page, so the catalog, the detail panel and the summary never drift apart.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

from src.integrations.contracts.catalog import Category, Product
from src.storefront.cart import Cart


def format_money(value: float) -> str:
    return f"{value:.2f} €"


templates = Environment(
    loader=PackageLoader("src.storefront", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
templates.filters["money"] = format_money


class StorefrontState:
    def __init__(self, categories: List[Category], products: List[Product]) -> None:
        self.categories = list(categories)
        self.products = list(products)
        self.selected_product: Optional[Product] = None
        self.cart = Cart()
        self._category_names = {c.id: c.name for c in self.categories}

    def find_product(self, product_id: Optional[str]) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def restore(self, selected_product_id: Optional[str], items: Iterable[Dict[str, Any]]) -> None:
        """
        Rebuild the selection and the cart sent back by the browser.

        Only product ids, license years and quantities are trusted; names and
        prices always come from the catalog. Lines for products that no longer
        exist are dropped.
        """
        self.selected_product = self.find_product(selected_product_id)
        self.cart.clear()
        for item in items or []:
            product = self.find_product(item.get("productId"))
            if product is None:
                continue
            self.cart.add(product, item.get("licenseYears"), qty=item.get("qty"))

    # --- Mutations ---------------------------------------------------------------

    def select_product(self, product_id: str) -> Dict[str, str]:
        self.selected_product = self.find_product(product_id)
        return self.render_page()

    def add_to_cart(self, product_id: str, license_years: Optional[int] = None) -> Dict[str, str]:
        product = self.find_product(product_id)
        if product is not None:
            self.cart.add(product, license_years)
        return self.render_page()

    def remove_from_cart(self, cart_id: str) -> Dict[str, str]:
        self.cart.remove(cart_id)
        return self.render_page()

    def clear_cart(self) -> Dict[str, str]:
        self.cart.clear()
        return self.render_page()

    # --- Rendering ---------------------------------------------------------------

    def render_catalog(self) -> Markup:
        return Markup(
            templates.get_template("catalog.html").render(
                products=self.products, category_names=self._category_names
            )
        )

    def render_product(self) -> Markup:
        return Markup(templates.get_template("product.html").render(p=self.selected_product))

    def render_summary(self) -> Markup:
        return Markup(
            templates.get_template("summary.html").render(lines=self.cart.lines, total=self.cart.total)
        )

    def render_page(self) -> Dict[str, str]:
        return {
            "catalog": self.render_catalog(),
            "product": self.render_product(),
            "summary": self.render_summary(),
        }
