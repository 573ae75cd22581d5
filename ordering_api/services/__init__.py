"""
                        Services Module

Business logic behind the HTTP endpoints. Each service takes the request's
database session (and any settings it needs) in its constructor.

Services:
    - tokens: session token issuance and verification
    - credentials: customer registration and password verification
    - orders: order placement and spend summaries
    - queries: read-only menu and customer listings
"""

from ordering_api.services.tokens import Identity, TokenService
from ordering_api.services.credentials import CredentialStore
from ordering_api.services.orders import OrderEngine, OrderSummary, PlacedOrder
from ordering_api.services.queries import QueryLayer

__all__ = [
    "Identity",
    "TokenService",
    "CredentialStore",
    "OrderEngine",
    "OrderSummary",
    "PlacedOrder",
    "QueryLayer",
]
