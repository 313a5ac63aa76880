from app.api.schemas.payment import (
    CheckoutResponse,
    ErrorResponse,
    Messages,
    PaymentItem,
    PaymentListResponse,
    PaymentReturnResponse,
)
