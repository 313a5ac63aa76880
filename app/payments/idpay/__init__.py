"""IDPay (idpay.ir) off-site redirect integration."""

from app.payments.idpay.client import IDPayClient
from app.payments.idpay.gateway import PLUGIN_ID, IDPayGateway, to_gateway_amount

__all__ = [
    "IDPayClient",
    "IDPayGateway",
    "PLUGIN_ID",
    "to_gateway_amount",
]
