"""
Public storefront routes.

GET /storefront renders the full page. The browser keeps only the selected
product id and the cart lines; every click is posted to
/api/storefront/actions, which rebuilds the state from the catalog, applies
the action and returns the re-rendered fragments together with the new cart.
"""

import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field

from src.api.dependencies import get_catalog_store, get_payment_client, get_settings
from src.database.catalog_store import CatalogStore
from src.integrations.clients.mocks.paypal import PayPalMockClient
from src.storefront.renderer import StorefrontState, templates as storefront_templates
from src.utils.config_loader import Settings

logger = logging.getLogger(__name__)

router = APIRouter()
page_templates = Jinja2Templates(env=storefront_templates)


class StorefrontAction(BaseModel):
    action: Literal["view", "select", "add", "remove", "clear"] = "view"
    productId: Optional[str] = None
    licenseYears: Optional[Any] = None
    cartId: Optional[str] = None
    selectedProductId: Optional[str] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)


@router.get("/storefront", response_class=HTMLResponse, tags=["Storefront"])
async def storefront_page(
    request: Request,
    store: CatalogStore = Depends(get_catalog_store),
    settings: Settings = Depends(get_settings),
    payment_client=Depends(get_payment_client),
):
    """Server-rendered catalog page (no selection, empty cart)."""
    categories, products = await store.list()
    state = StorefrontState(categories, products)
    return page_templates.TemplateResponse(
        request,
        "page.html",
        {
            **state.render_page(),
            "paypal_client_id": settings.paypal.client_id,
            "currency": "EUR",
            "mock_checkout": isinstance(payment_client, PayPalMockClient),
        },
    )


@router.post("/api/storefront/actions", tags=["Storefront"])
async def storefront_action(body: StorefrontAction, store: CatalogStore = Depends(get_catalog_store)):
    categories, products = await store.list()
    state = StorefrontState(categories, products)
    state.restore(body.selectedProductId, body.items)

    if body.action == "select":
        page = state.select_product(body.productId)
    elif body.action == "add":
        page = state.add_to_cart(body.productId, body.licenseYears)
    elif body.action == "remove":
        page = state.remove_from_cart(body.cartId or "")
    elif body.action == "clear":
        page = state.clear_cart()
    else:
        page = state.render_page()

    selected = state.selected_product
    return {
        **page,
        "selectedProductId": selected.id if selected else None,
        "items": state.cart.to_items(),
        "total": round(state.cart.total, 2),
    }
