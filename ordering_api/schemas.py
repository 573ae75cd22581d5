"""
Pydantic Schemas for Request/Response Validation

Request bodies accept missing fields so the services can report them as
``400 Missing required fields`` rather than FastAPI's default 422.
"""

from decimal import Decimal
from typing import Annotated, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, StrictInt

from ordering_api.services.orders import MAX_INT


# Money is computed with Decimal and rendered as a JSON number
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class RegisterRequest(BaseModel):
    """Request schema for customer registration."""
    fullname: Optional[str] = Field(None, max_length=100, examples=["John Doe"])
    address: Optional[str] = Field(None, max_length=255, examples=["350 Fifth Avenue"])
    phone: Optional[str] = Field(None, max_length=20, examples=["555-123-4567"])
    email: Optional[str] = Field(None, max_length=255, examples=["john@example.com"])
    username: Optional[str] = Field(None, max_length=50, examples=["jdoe"])
    password: Optional[str] = Field(None, examples=["s3cret-pass"])


class LoginRequest(BaseModel):
    username: Optional[str] = Field(None, examples=["jdoe"])
    password: Optional[str] = Field(None, examples=["s3cret-pass"])


class OrderCreate(BaseModel):
    """Request schema for placing an order."""
    menu_id: Optional[StrictInt] = Field(None, ge=1, le=MAX_INT, examples=[1])
    quantity: Optional[StrictInt] = Field(None, le=MAX_INT, examples=[2])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class RegisterResponse(BaseModel):
    message: str
    userId: int


class TokenResponse(BaseModel):
    token: str


class TokenUser(BaseModel):
    """Claims carried by the caller's session token."""
    id: int
    username: str
    iat: Optional[int] = None
    exp: Optional[int] = None


class ProfileResponse(BaseModel):
    message: str
    user: TokenUser


class CustomerResponse(BaseModel):
    """Public customer fields. There is no password field."""
    id: int
    username: str
    fullname: str
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderCreateResponse(BaseModel):
    """Response after successfully placing an order."""
    message: str
    orderId: int
    total_price: Money


class OrderSummaryResponse(BaseModel):
    customer_name: str
    total_amount: Money


class MenuResponse(BaseModel):
    """Menu item joined with its restaurant."""
    menu_id: int
    menu_name: str
    description: Optional[str] = None
    price: Money
    category: Optional[str] = None
    restaurant_id: int
    restaurant_name: str
    restaurant_address: Optional[str] = None
    restaurant_phone: Optional[str] = None
    menu_description: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    timestamp: datetime

