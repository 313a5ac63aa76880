"""
String constants for payment fields.
Using plain strings (not Enums) so values round-trip through the database
and the processor API unchanged.
"""


class PaymentState:
    AUTHORIZATION = "authorization"
    COMPLETED = "completed"
    FAILED = "failed"


class GatewayMode:
    TEST = "test"
    LIVE = "live"


class RedirectMethod:
    POST = "post"


# Iranian Toman is not an ISO 4217 code; IDPay only accepts Rials.
TOMAN_CURRENCY_CODE = "TMN"
TOMAN_TO_RIAL = 10

# Inquiry status meaning "verified and paid".
IDPAY_STATUS_VERIFIED = 100
