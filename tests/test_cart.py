import pytest

from src.integrations.contracts.catalog import Category, Product
from src.storefront.cart import Cart
from src.storefront.renderer import StorefrontState


def _product(product_id="p1", price=100.0, years=(1, 2, 3), **kwargs):
    return Product(
        id=product_id,
        category_id="c1",
        name=kwargs.pop("name", f"Product {product_id}"),
        price=price,
        has_multi_year_license=len(years) > 1,
        license_options_years=list(years),
        **kwargs,
    )


def test_same_license_selection_increments_quantity():
    cart = Cart()
    product = _product()

    cart.add(product, 2)
    cart.add(product, 2)

    assert len(cart.lines) == 1
    assert cart.lines[0].qty == 2
    assert cart.lines[0].cart_id == "p1-2"


def test_different_license_selection_creates_new_line():
    cart = Cart()
    product = _product()

    cart.add(product, 2)
    cart.add(product, 2)
    cart.add(product, 1)

    assert [(line.license_years, line.qty) for line in cart.lines] == [(2, 2), (1, 1)]
    assert cart.total == pytest.approx(300.0)


def test_total_tracks_every_mutation():
    cart = Cart()
    a = _product("a", price=10.5)
    b = _product("b", price=4.25, years=(1,))

    cart.add(a)
    cart.add(b)
    cart.add(b)
    assert cart.total == pytest.approx(10.5 + 2 * 4.25)

    cart.remove("a-1")
    assert cart.total == pytest.approx(8.5)

    cart.clear()
    assert cart.total == 0
    assert cart.is_empty


def test_default_license_is_first_option():
    cart = Cart()
    line = cart.add(_product(years=(3, 5)))
    assert line.license_years == 3


def test_to_items_matches_order_payload_shape():
    cart = Cart()
    cart.add(_product(), 2)

    assert cart.to_items() == [
        {"cartId": "p1-2", "productId": "p1", "name": "Product p1", "price": 100.0, "qty": 1, "licenseYears": 2}
    ]


def test_license_years_outside_product_options_fall_back_to_first_option():
    cart = Cart()
    product = _product(years=(1, 2, 3))

    line = cart.add(product, 5)
    again = cart.add(product, "junk")

    assert line is again
    assert line.license_years == 1
    assert line.qty == 2
    assert [l.cart_id for l in cart.lines] == ["p1-1"]


def test_add_with_quantity():
    cart = Cart()

    cart.add(_product(), 2, qty=3)
    cart.add(_product(), 2, qty=0)

    assert cart.lines[0].qty == 4


def test_renderer_selection_and_summary():
    state = StorefrontState(
        [Category(id="c1", name="Scanners", slug="scanners")],
        [_product(name="<Scanner>", features=["Bluetooth"], ar_code_model_url="https://ar.example/1")],
    )

    assert "Select a product" in state.render_product()
    assert "Your cart is empty" in state.render_summary()

    page = state.select_product("p1")
    detail = page["product"]
    assert "&lt;Scanner&gt;" in detail
    assert "<li>Bluetooth</li>" in detail
    assert 'name="licenseYears"' in detail
    assert "https://ar.example/1" in detail

    state.add_to_cart("p1", 2)
    page = state.add_to_cart("p1", 2)
    assert "x 2" in page["summary"]
    assert "Total: 200.00 €" in page["summary"]
    assert 'data-cart-id="p1-2"' in page["summary"]

    catalog = page["catalog"]
    assert "Scanners" in catalog
    assert "<Scanner>" not in catalog
    assert "&lt;Scanner&gt;" in catalog


def test_every_mutation_returns_the_whole_page():
    state = StorefrontState([], [_product()])

    for page in (
        state.select_product("p1"),
        state.add_to_cart("p1"),
        state.remove_from_cart("p1-1"),
        state.clear_cart(),
    ):
        assert set(page) == {"catalog", "product", "summary"}

    assert "Product p1" in page["product"]
    assert "Your cart is empty" in page["summary"]


def test_empty_catalog_message():
    assert "The catalog is empty" in StorefrontState([], []).render_catalog()


def test_restore_trusts_catalog_prices_only():
    state = StorefrontState([], [_product(price=50.0)])

    state.restore(
        "p1",
        [
            {"productId": "p1", "licenseYears": 2, "qty": 3, "price": 0.01, "name": "Cheap"},
            {"productId": "gone", "qty": 1},
        ],
    )

    assert state.selected_product.id == "p1"
    assert [(l.name, l.price, l.qty, l.license_years) for l in state.cart.lines] == [("Product p1", 50.0, 3, 2)]
    assert state.cart.total == pytest.approx(150.0)


def test_renderer_ignores_unknown_products():
    state = StorefrontState([], [_product()])

    state.add_to_cart("missing")
    state.select_product("missing")

    assert state.cart.is_empty
    assert state.selected_product is None
