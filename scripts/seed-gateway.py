"""
Configure the IDPay gateway and (optionally) a sample order.

Creates or updates the "idpay" PaymentGateway row from:
- IDPAY_API_KEY   web-service key from https://idpay.ir/dashboard/web-services
- IDPAY_MODE      "test" (sandbox, default) or "live"

With --sample-order AMOUNT [CURRENCY] also creates an order paid through it
and prints its checkout URL.

Usage (project root, .env configured):
    python scripts/seed-gateway.py
    python scripts/seed-gateway.py --sample-order 5000 TMN

Requires: migrations applied (alembic upgrade head).
"""

import argparse
import logging
import os
import sys
from decimal import Decimal

# .env must be loaded before importing app (session reads DATABASE_URL)
from pathlib import Path
root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(root))
os.chdir(root)

from dotenv import load_dotenv
load_dotenv()

from app.core.logging import setup_logger
from app.database.models.order import Order
from app.database.models.payment_gateway import PaymentGateway
from app.database.session import get_session
from app.payments.idpay import PLUGIN_ID
from app.utils.enums import GatewayMode

logger = logging.getLogger("seed-gateway")

GATEWAY_ID = "idpay"
GATEWAY_LABEL = "IDPay"


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--sample-order", nargs="+", metavar=("AMOUNT", "CURRENCY"))
    args = parser.parse_args()

    setup_logger(logging.INFO)

    api_key = os.getenv("IDPAY_API_KEY", "")
    mode = os.getenv("IDPAY_MODE", GatewayMode.TEST).strip().lower()
    if mode not in (GatewayMode.TEST, GatewayMode.LIVE):
        parser.error(f"IDPAY_MODE must be '{GatewayMode.TEST}' or '{GatewayMode.LIVE}', got {mode!r}")
    if not api_key:
        logger.warning("IDPAY_API_KEY is empty; IDPay will reject every request")

    with get_session() as session:
        gateway = session.get(PaymentGateway, GATEWAY_ID)
        if gateway is None:
            gateway = PaymentGateway(id=GATEWAY_ID, label=GATEWAY_LABEL, plugin=PLUGIN_ID)
            session.add(gateway)
            logger.info(f"Created gateway {GATEWAY_ID} ({mode})")
        else:
            logger.info(f"Updated gateway {GATEWAY_ID} ({gateway.mode} -> {mode})")
        gateway.api_key = api_key
        gateway.mode = mode
        gateway.status = True
        session.flush()

        if args.sample_order:
            amount = Decimal(args.sample_order[0])
            currency = args.sample_order[1].upper() if len(args.sample_order) > 1 else "IRR"
            order = Order(total_number=amount, currency_code=currency, payment_gateway_id=GATEWAY_ID)
            session.add(order)
            session.flush()
            logger.info(f"Created order {order.id}: {amount} {currency}")
            logger.info(f"Start payment with: POST /checkout/{order.id}/payment")


if __name__ == "__main__":
    main()
