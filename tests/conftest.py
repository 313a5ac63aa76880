"""
Pytest global configuration for the IDPay gateway.

- In-memory SQLite replaces the PostgreSQL engine used by get_session()/get_db()
- FakeIDPay stands in for the requests.Session talking to the processor; it
  returns real requests.Response objects so raise_for_status() and the error
  classification run unmodified
"""

from dotenv import load_dotenv
import os

# Load .env.test first; default to an in-memory database
load_dotenv(".env.test")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import json
from collections import defaultdict, deque
from decimal import Decimal
from types import SimpleNamespace

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.database.session as db_session_module
from app.database.session import Base
import app.database.models  # noqa: F401 - registers every model on Base.metadata
from app.database.models.order import Order
from app.database.models.payment_gateway import PaymentGateway
from app.database.repositories.payment_repository import PaymentRepository
from app.payments.base import MessageBag, PaymentGatewayConfiguration
from app.payments.idpay.gateway import PLUGIN_ID, IDPayGateway

IDPAY_PAYMENT_URL = "https://api.idpay.ir/v1/payment"
IDPAY_INQUIRY_URL = "https://api.idpay.ir/v1/payment/inquiry"

_REASONS = {
    200: "OK",
    201: "Created",
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
}


def make_response(status_code, body=None, url=IDPAY_PAYMENT_URL):
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.reason = _REASONS.get(status_code, "")
    response.encoding = "utf-8"
    if isinstance(body, (dict, list)):
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    elif isinstance(body, str):
        response._content = body.encode("utf-8")
    else:
        response._content = b""
    return response


class FakeIDPay:
    """Scripted stand-in for requests.Session.post, one queue per URL."""

    def __init__(self):
        self.calls = []
        self._outcomes = defaultdict(deque)

    def reply(self, url, status_code, body=None):
        self._outcomes[url].append(make_response(status_code, body, url))

    def fail(self, url, error):
        self._outcomes[url].append(error)

    def post(self, url, json=None, headers=None, timeout=None, **kwargs):
        self.calls.append(SimpleNamespace(url=url, json=json, headers=headers, timeout=timeout))
        assert self._outcomes[url], f"unexpected POST {url}"
        outcome = self._outcomes[url].popleft()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def calls_to(self, url):
        return [call for call in self.calls if call.url == url]


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def test_db_engine():
    """
    Fresh in-memory database; replaces the engine and SessionLocal used by
    get_session() / get_db().
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    original_engine = db_session_module.engine
    original_sessionmaker = db_session_module.SessionLocal
    db_session_module.engine = engine
    db_session_module.SessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
    )

    yield engine

    db_session_module.engine = original_engine
    db_session_module.SessionLocal = original_sessionmaker
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(test_db_engine):
    session = db_session_module.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def gateway_row(db_session):
    gateway = PaymentGateway(
        id="idpay",
        label="IDPay",
        plugin=PLUGIN_ID,
        mode="test",
        api_key="test-api-key",
        status=True,
    )
    db_session.add(gateway)
    db_session.commit()
    return gateway


@pytest.fixture
def make_order(db_session, gateway_row):
    def _make(order_id=42, total="100000", currency_code="IRR", gateway_id="idpay"):
        order = Order(
            id=order_id,
            total_number=Decimal(total),
            currency_code=currency_code,
            payment_gateway_id=gateway_id,
        )
        db_session.add(order)
        db_session.commit()
        return order
    return _make


# ============================================================================
# GATEWAY FIXTURES
# ============================================================================

@pytest.fixture
def fake_idpay():
    return FakeIDPay()


@pytest.fixture
def messages():
    return MessageBag()


@pytest.fixture
def payments(db_session):
    return PaymentRepository(db_session)


@pytest.fixture
def make_gateway(payments, messages, fake_idpay):
    def _make(mode="test", api_key="test-api-key", repository=None):
        configuration = PaymentGatewayConfiguration(gateway_id="idpay", api_key=api_key, mode=mode)
        return IDPayGateway(
            configuration=configuration,
            payments=repository or payments,
            messages=messages,
            http=fake_idpay,
        )
    return _make


@pytest.fixture
def idpay_gateway(make_gateway):
    return make_gateway()


@pytest.fixture
def pending_payment(payments, make_order):
    order = make_order()
    return payments.create(
        state="authorization",
        amount=order.total_number,
        currency_code=order.currency_code,
        payment_gateway_id="idpay",
        order_id=order.id,
        remote_id="d2e353189823079e1e4181772cff5292",
    )


# ============================================================================
# FASTAPI CLIENT
# ============================================================================

@pytest.fixture(scope="function")
def test_client(test_db_engine, fake_idpay):
    """TestClient on the test database with the processor faked out."""
    from app.api.dependencies import get_http_session
    from app.api.main import app

    app.dependency_overrides[get_http_session] = lambda: fake_idpay
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
