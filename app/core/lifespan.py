import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from sqlalchemy import text
from app.core.logging import setup_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = setup_logger(os.getenv("LOG_LEVEL", "INFO"))
    logger.info("🚀 IDPay Gateway API starting...")

    # Database
    try:
        from app.database.session import engine
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("✅ Database connection OK")
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")

    # Gateways
    try:
        from app.database.session import get_session
        from app.database.repositories.order_repository import PaymentGatewayRepository
        from app.payments.idpay import PLUGIN_ID
        with get_session() as session:
            gateways = PaymentGatewayRepository(session).get_by_plugin(PLUGIN_ID)
            for gateway in gateways:
                logger.info(f"Gateway {gateway.id}: mode={gateway.mode} enabled={gateway.status}")
            if not gateways:
                logger.warning("No IDPay gateway configured; run scripts/seed-gateway.py")
    except Exception as e:
        logger.error(f"❌ Could not read gateway configuration: {e}")

    yield

    logger.info("🛑 IDPay Gateway API shutting down...")
