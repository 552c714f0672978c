import logging
import math
from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from src.api.dependencies import get_notification_dispatcher
from src.error_handler import ValidationFailed
from src.integrations.contracts.orders import CartLine, Customer, Order
from src.integrations.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

api = APIRouter()
orders_api = api

ORDER_ACCEPTED = "Order accepted. Notifications sent."


class CustomerPayload(BaseModel):
    firstName: Optional[str] = ""
    lastName: Optional[str] = ""
    email: Optional[str] = ""
    phone: Optional[str] = None
    country: Optional[str] = ""
    city: Optional[str] = ""
    address: Optional[str] = ""
    postcode: Optional[str] = ""
    note: Optional[str] = None


class OrderItemPayload(BaseModel):
    """A cart line as the browser sends it; numbers are coerced in to_order."""

    model_config = ConfigDict(extra="allow")

    productId: Any = ""
    name: Any = ""
    price: Any = None
    qty: Any = None
    licenseYears: Any = None


class SubmitOrderRequest(BaseModel):
    customer: Optional[CustomerPayload] = None
    items: List[OrderItemPayload] = Field(default_factory=list)
    total: Any = None
    paypalOrderId: Optional[str] = None


def _as_number(value: Any, default: float) -> float:
    if isinstance(value, bool) or value is None or value == "":
        return default
    try:
        number = float(str(value).strip().replace(",", "."))
    except ValueError:
        return default
    return number if math.isfinite(number) else default


def _as_count(value: Any) -> int:
    number = _as_number(value, 1)
    return int(number) if number >= 1 else 1


def to_order(body: SubmitOrderRequest) -> Order:
    """
    Build the notification Order from a submitted payload.

    Unusable prices count as 0, quantities and license lengths below 1 count
    as 1, and a missing or unparseable total is recomputed from the lines.
    """
    c = body.customer
    customer = Customer(
        first_name=c.firstName or "",
        last_name=c.lastName or "",
        email=(c.email or "").strip(),
        phone=c.phone,
        country=c.country or "",
        city=c.city or "",
        address=c.address or "",
        postcode=c.postcode or "",
        note=c.note,
    )
    items = [
        CartLine(
            product_id=str(i.productId or ""),
            name=str(i.name or ""),
            price=_as_number(i.price, 0.0),
            qty=_as_count(i.qty),
            license_years=_as_count(i.licenseYears),
        )
        for i in body.items
    ]
    total = _as_number(body.total, -1.0)
    if total < 0:
        total = sum(line.subtotal for line in items)
    return Order(customer=customer, items=items, total=total, paypal_order_id=body.paypalOrderId)


@api.post("/orders", tags=["Orders"])
async def submit_order(
    body: SubmitOrderRequest,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    if body.customer is None or not (body.customer.email or "").strip() or not body.items:
        raise ValidationFailed("Invalid order data")

    order = to_order(body)
    logger.info("Order received for PayPal order %s (%d items)", order.paypal_order_id or "-", len(order.items))
    await dispatcher.dispatch(order)
    return {"ok": True, "message": ORDER_ACCEPTED}
