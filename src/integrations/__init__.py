"""
Integrations layer.
This package contains all code used to communicate with external systems:
- PayPal Orders API (create / capture)
- Order notification channels (SMTP email, Telegram bot)

Key rule:
- API endpoints MUST NOT call external APIs directly.
- Endpoints go through the clients under src/integrations/clients and the
  services under src/integrations/notifications.
- The REAL_HTTP PayPal client is the default; the MOCK client is used only when
  INTEGRATIONS_MODE is "mock" or "test" (see select_payment_client).
"""

from .contracts.catalog import Category, Product
from .contracts.orders import CartLine, Customer, Order

__all__ = ["Category", "Product", "CartLine", "Customer", "Order"]
