"""
Tests for IDPayGateway.initiate

Scope:
- Payload and headers sent to POST /payment
- Toman -> Rial amount rule
- Pending payment persisted only when IDPay accepted the request
"""

from decimal import Decimal

import pytest
import requests

from app.payments.base import CheckoutContext, Price
from app.payments.exceptions import PaymentValidationError, UpstreamError
from app.payments.idpay.gateway import to_gateway_amount

PAYMENT_URL = "https://api.idpay.ir/v1/payment"
RETURN_URL = "https://shop.example/checkout/42/payment/return/secret-key"
LINK = "https://idpay.ir/p/ws-sandbox/d2e353189823079e1e4181772cff5292"


def checkout_for(order_id=42, number="100000", currency_code="IRR", return_url=RETURN_URL):
    return CheckoutContext(
        order_id=order_id,
        total=Price(number=Decimal(number), currency_code=currency_code),
        return_url=return_url,
    )


class TestGatewayAmount:

    def test_rial_amount_is_sent_unchanged(self):
        assert to_gateway_amount(Price(Decimal("100000"), "IRR")) == 100000

    def test_toman_amount_is_multiplied_by_ten(self):
        assert to_gateway_amount(Price(Decimal("5000"), "TMN")) == 50000

    def test_other_currencies_are_not_converted(self):
        assert to_gateway_amount(Price(Decimal("250"), "USD")) == 250

    def test_fraction_is_truncated_before_conversion(self):
        assert to_gateway_amount(Price(Decimal("5000.75"), "TMN")) == 50000
        assert to_gateway_amount(Price(Decimal("99.99"), "IRR")) == 99


class TestInitiateSuccess:

    def test_posts_payment_request(self, idpay_gateway, fake_idpay, make_order):
        make_order()
        fake_idpay.reply(PAYMENT_URL, 201, {"id": "d2e353189823079e1e4181772cff5292", "link": LINK})

        idpay_gateway.initiate(checkout_for())

        [call] = fake_idpay.calls
        assert call.url == PAYMENT_URL
        assert call.json == {
            "order_id": "42",
            "amount": 100000,
            "phone": "",
            "desc": "Order number #42",
            "callback": RETURN_URL,
        }
        assert call.headers == {
            "Content-Type": "application/json",
            "X-API-KEY": "test-api-key",
            "X-SANDBOX": "true",
        }

    def test_returns_post_redirect_to_link(self, idpay_gateway, fake_idpay, make_order):
        make_order()
        fake_idpay.reply(PAYMENT_URL, 201, {"id": "abc", "link": LINK})

        target = idpay_gateway.initiate(checkout_for())

        assert target.url == LINK
        assert target.method == "post"

    def test_persists_one_pending_payment(self, idpay_gateway, fake_idpay, payments, make_order):
        make_order()
        fake_idpay.reply(PAYMENT_URL, 201, {"id": "abc", "link": LINK})

        idpay_gateway.initiate(checkout_for())

        [payment] = payments.list_for_order(42)
        assert payment.state == "authorization"
        assert payment.remote_id == "abc"
        assert payment.amount == Decimal("100000")
        assert payment.currency_code == "IRR"
        assert payment.payment_gateway_id == "idpay"
        assert payment.remote_state is None

    def test_toman_order_sends_rials_but_stores_order_total(
        self, idpay_gateway, fake_idpay, payments, make_order
    ):
        make_order(total="5000", currency_code="TMN")
        fake_idpay.reply(PAYMENT_URL, 201, {"id": "abc", "link": LINK})

        idpay_gateway.initiate(checkout_for(number="5000", currency_code="TMN"))

        assert fake_idpay.calls[0].json["amount"] == 50000
        [payment] = payments.list_for_order(42)
        assert payment.amount == Decimal("5000")
        assert payment.currency_code == "TMN"

    def test_live_mode_disables_sandbox(self, make_gateway, fake_idpay, make_order):
        make_order()
        fake_idpay.reply(PAYMENT_URL, 201, {"id": "abc", "link": LINK})

        make_gateway(mode="live", api_key="live-key").initiate(checkout_for())

        headers = fake_idpay.calls[0].headers
        assert headers["X-SANDBOX"] == "false"
        assert headers["X-API-KEY"] == "live-key"

    def test_numeric_remote_id_is_stored_as_text(self, idpay_gateway, fake_idpay, payments, make_order):
        make_order()
        fake_idpay.reply(PAYMENT_URL, 201, {"id": 123456, "link": LINK})

        idpay_gateway.initiate(checkout_for())

        assert payments.list_for_order(42)[0].remote_id == "123456"


class TestInitiateFailure:

    def test_client_error_surfaces_processor_message(
        self, idpay_gateway, fake_idpay, messages, payments, make_order
    ):
        make_order()
        fake_idpay.reply(PAYMENT_URL, 406, {"error_code": 34, "error_message": "مبلغ باید بیشتر از 1,000 ریال باشد."})

        with pytest.raises(UpstreamError) as excinfo:
            idpay_gateway.initiate(checkout_for())

        error = excinfo.value
        assert error.http_code == 406
        assert error.error_code == 34
        assert error.error_message == "مبلغ باید بیشتر از 1,000 ریال باشد."
        assert error.url == PAYMENT_URL
        assert error.is_client_error
        assert messages.errors == ["مبلغ باید بیشتر از 1,000 ریال باشد."]
        assert payments.count() == 0

    def test_client_error_without_body_still_raises(self, idpay_gateway, fake_idpay, messages, payments, make_order):
        make_order()
        fake_idpay.reply(PAYMENT_URL, 403, "<html>forbidden</html>")

        with pytest.raises(UpstreamError) as excinfo:
            idpay_gateway.initiate(checkout_for())

        assert excinfo.value.http_code == 403
        assert excinfo.value.error_message is None
        assert messages.errors == []
        assert payments.count() == 0

    def test_server_error_carries_raw_message(self, idpay_gateway, fake_idpay, messages, payments, make_order):
        make_order()
        fake_idpay.reply(PAYMENT_URL, 500, "upstream exploded")

        with pytest.raises(UpstreamError) as excinfo:
            idpay_gateway.initiate(checkout_for())

        error = excinfo.value
        assert error.is_server_error
        assert error.error_code is None
        assert "500" in str(error)
        assert messages.errors == []
        assert payments.count() == 0

    def test_transport_error(self, idpay_gateway, fake_idpay, payments, make_order):
        make_order()
        fake_idpay.fail(PAYMENT_URL, requests.ConnectionError("connection reset by peer"))

        with pytest.raises(UpstreamError) as excinfo:
            idpay_gateway.initiate(checkout_for())

        assert excinfo.value.http_code is None
        assert "connection reset by peer" in str(excinfo.value)
        assert payments.count() == 0

    def test_response_without_link_is_rejected(self, idpay_gateway, fake_idpay, payments, make_order):
        make_order()
        fake_idpay.reply(PAYMENT_URL, 201, {"id": "abc"})

        with pytest.raises(UpstreamError):
            idpay_gateway.initiate(checkout_for())

        assert payments.count() == 0

    def test_non_json_success_body_is_rejected(self, idpay_gateway, fake_idpay, payments, make_order):
        make_order()
        fake_idpay.reply(PAYMENT_URL, 201, "not json")

        with pytest.raises(UpstreamError):
            idpay_gateway.initiate(checkout_for())

        assert payments.count() == 0

    def test_zero_total_never_reaches_processor(self, idpay_gateway, fake_idpay, payments):
        with pytest.raises(PaymentValidationError):
            idpay_gateway.initiate(checkout_for(number="0"))

        assert fake_idpay.calls == []
        assert payments.count() == 0

    def test_missing_return_url(self, idpay_gateway, fake_idpay):
        with pytest.raises(PaymentValidationError):
            idpay_gateway.initiate(checkout_for(return_url=""))

        assert fake_idpay.calls == []
