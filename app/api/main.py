"""
IDPay Gateway - FastAPI Application

Off-site IDPay payments for the shop checkout: starts payments, receives the
customer's return and verifies it with the processor.

Usage:
    uvicorn app.api.main:app --reload --host 0.0.0.0 --port 8000

Docs:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

from dotenv import load_dotenv
import os

load_dotenv()  # load .env from current working directory (project root)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from app.core.exceptions import internal_error_handler, not_found_handler, payment_error_handler
from app.core.lifespan import lifespan
from app.core.middleware import request_logger
from app.payments.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


app = FastAPI(
    title="IDPay Gateway API",
    description="Off-site IDPay payment initiation and server-side verification.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS – allow frontend origins (configurable via .env CORS_ORIGINS, comma-separated)
_DEFAULT_CORS = "http://localhost:3000,http://127.0.0.1:3000"
_CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", _DEFAULT_CORS).split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(request_logger)

app.add_exception_handler(PaymentGatewayError, payment_error_handler)
app.add_exception_handler(404, not_found_handler)
app.add_exception_handler(Exception, internal_error_handler)


# Health endpoints
@app.get("/", tags=["Health"])
async def root():
    return {
        "name": "IDPay Gateway API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
def health_check():
    health = {"status": "healthy", "components": {"api": "ok"}}
    try:
        from app.database.session import engine
        from sqlalchemy import text
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        health["components"]["database"] = "ok"
    except Exception as e:
        health["status"] = "degraded"
        health["components"]["database"] = f"error: {str(e)}"
    return health


# Register routers
from app.api.routers import checkout, orders

app.include_router(checkout.router, tags=["Checkout"])
app.include_router(orders.router, tags=["Orders"])

logger.info("Routers registered: checkout, orders")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.api.main:app", host="0.0.0.0", port=8000, reload=True)
