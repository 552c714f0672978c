"""
Real HTTP integration clients.

These clients communicate with real external systems via httpx, e.g.:
- PayPal Orders v2 API

Important:
- Must implement the same interface as the mock clients

Switching:
The selection of mock vs real clients happens in select_payment_client only.
"""
