"""Request / response bodies of the IDPay v1 web service."""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _as_text(value: Any) -> Any:
    # IDPay sends ids as strings or numbers depending on the endpoint.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class CreatePaymentRequest(BaseModel):
    order_id: str
    amount: int = Field(..., gt=0)
    phone: str = ""
    desc: str = ""
    callback: str


class CreatePaymentResponse(BaseModel):
    id: str = Field(..., min_length=1)
    link: str = Field(..., min_length=1)
    model_config = ConfigDict(extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _as_text(value)


class InquiryRequest(BaseModel):
    id: str
    order_id: str


class InquiryResponse(BaseModel):
    status: int
    track_id: Optional[str] = None
    card_no: Optional[str] = None
    model_config = ConfigDict(extra="ignore")

    @field_validator("track_id", "card_no", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @model_validator(mode="before")
    @classmethod
    def _lift_payment_details(cls, data: Any) -> Any:
        """card_no / track_id may be nested under "payment" in v1.1 answers."""
        if isinstance(data, dict) and isinstance(data.get("payment"), dict):
            payment = data["payment"]
            data = dict(data)
            data.setdefault("card_no", payment.get("card_no"))
            data.setdefault("track_id", payment.get("track_id"))
        return data

    def describe(self) -> str:
        """remote_state stamp stored on the payment."""
        track_id = self.track_id or ""
        card_no = self.card_no or ""
        return f"track_id: {track_id} / status: {self.status} / card_no: {card_no}"


class ErrorResponse(BaseModel):
    error_code: Optional[int] = None
    error_message: Optional[str] = None
    model_config = ConfigDict(extra="ignore")


class CallbackParams(BaseModel):
    """
    Fields posted back by the customer's browser.

    None of them is trusted: order_id is only compared with the order being
    returned to, id selects the pending payment, the rest is logged.
    """
    status: Optional[str] = None
    track_id: Optional[str] = None
    id: Optional[str] = None
    order_id: Optional[str] = None
    amount: Optional[str] = None
    date: Optional[str] = None
    model_config = ConfigDict(extra="ignore")

    @field_validator("status", "track_id", "id", "order_id", "amount", "date", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)
