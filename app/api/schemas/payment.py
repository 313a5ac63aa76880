from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Messages(BaseModel):
    """User-facing messages gathered while the request ran."""
    errors: List[str] = Field(default_factory=list)
    statuses: List[str] = Field(default_factory=list)


class CheckoutResponse(BaseModel):
    """Off-site redirect: the client submits `data` to `redirect_url` using `redirect_method`."""
    order_id: int
    redirect_url: str
    redirect_method: str
    data: Dict[str, Any] = Field(default_factory=dict)
    messages: Messages = Field(default_factory=Messages)


class PaymentItem(BaseModel):
    id: int
    order_id: int
    payment_gateway_id: str
    amount: Decimal
    currency_code: str
    state: str
    remote_id: Optional[str] = None
    remote_state: Optional[str] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class PaymentReturnResponse(BaseModel):
    payment: PaymentItem
    messages: Messages = Field(default_factory=Messages)


class PaymentListResponse(BaseModel):
    payments: List[PaymentItem]


class ErrorResponse(BaseModel):
    """Body of every gateway error answer."""
    error: str = Field(..., description="Error class")
    message: str = Field(..., description="Human readable message")
    messages: Messages = Field(default_factory=Messages)
    details: Optional[Dict[str, Any]] = None
