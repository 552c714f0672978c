"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- PayPal credentials are not configured
- We want to exercise checkout end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as real HTTP clients.
"""
