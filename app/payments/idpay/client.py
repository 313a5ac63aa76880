"""
IDPay web service client.

Thin wrapper over a requests.Session that speaks the two endpoints the
off-site flow needs:

- POST {IDPAY_API_URL}/payment          create a payment, get {id, link}
- POST {IDPAY_API_URL}/payment/inquiry  authoritative status of a payment

Every non-2xx answer or transport failure becomes an UpstreamError; every
2xx body is validated against its pydantic schema before it is returned.

Environment:
- IDPAY_API_URL  (default https://api.idpay.ir/v1)
- IDPAY_TIMEOUT  seconds per request (default 30)
"""

import logging
import os
from typing import Any, Dict, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from app.payments.exceptions import UpstreamError
from app.payments.idpay.schemas import (
    CreatePaymentRequest,
    CreatePaymentResponse,
    ErrorResponse,
    InquiryRequest,
    InquiryResponse,
)

logger = logging.getLogger(__name__)

IDPAY_API_URL = os.getenv("IDPAY_API_URL", "https://api.idpay.ir/v1")
IDPAY_TIMEOUT = float(os.getenv("IDPAY_TIMEOUT", "30"))

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


class IDPayClient:
    """
    HTTP client for one configured IDPay merchant.

    Args:
        api_key: Merchant web-service key (sent as X-API-KEY)
        sandbox: Target the sandbox environment (X-SANDBOX: true)
        session: requests.Session to send through; a new one if omitted
        base_url: API root, without trailing slash
        timeout: Seconds per request
    """

    def __init__(
        self,
        api_key: str,
        sandbox: bool,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.sandbox = sandbox
        self.session = session or requests.Session()
        self.base_url = (base_url or IDPAY_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else IDPAY_TIMEOUT

    @property
    def payment_url(self) -> str:
        return f"{self.base_url}/payment"

    @property
    def inquiry_url(self) -> str:
        return f"{self.base_url}/payment/inquiry"

    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-API-KEY": self.api_key,
            "X-SANDBOX": "true" if self.sandbox else "false",
        }

    def create_payment(self, request: CreatePaymentRequest) -> CreatePaymentResponse:
        body = self._post(self.payment_url, request.model_dump())
        return self._parse(CreatePaymentResponse, body, self.payment_url)

    def inquire(self, remote_id: str, order_id: Any) -> InquiryResponse:
        request = InquiryRequest(id=str(remote_id), order_id=str(order_id))
        body = self._post(self.inquiry_url, request.model_dump())
        return self._parse(InquiryResponse, body, self.inquiry_url)

    def _post(self, url: str, payload: Dict[str, Any]) -> Any:
        try:
            response = self.session.post(
                url,
                json=payload,
                headers=self.headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            raise self._classify(e, url) from e
        except requests.RequestException as e:
            logger.error(f"IDPay request to {url} failed: {e}")
            raise UpstreamError(f"commerce_idpay: {e}", url=url) from e

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"IDPay returned a non-JSON body from {url}")
            raise UpstreamError(
                "commerce_idpay: response body is not valid JSON",
                http_code=response.status_code,
                url=url,
            ) from e

    def _classify(self, error: requests.HTTPError, url: str) -> UpstreamError:
        """4xx carries {error_code, error_message}; 5xx carries nothing we trust."""
        response = error.response
        http_code = response.status_code if response is not None else None

        if http_code is not None and 400 <= http_code < 500:
            details = ErrorResponse()
            try:
                details = ErrorResponse.model_validate(response.json())
            except (ValueError, ValidationError):
                logger.warning(f"IDPay {http_code} from {url} without a structured error body")
            logger.warning(
                f"IDPay rejected request to {url}: http={http_code} "
                f"error_code={details.error_code} error_message={details.error_message}"
            )
            return UpstreamError(
                f"commerce_idpay: {error}",
                http_code=http_code,
                error_code=details.error_code,
                error_message=details.error_message,
                url=url,
            )

        logger.error(f"IDPay server error from {url}: {error}")
        return UpstreamError(f"commerce_idpay: {error}", http_code=http_code, url=url)

    @staticmethod
    def _parse(model: Type[ResponseModel], body: Any, url: str) -> ResponseModel:
        try:
            return model.model_validate(body)
        except ValidationError as e:
            logger.error(f"Unexpected IDPay response from {url}: {e}")
            raise UpstreamError(
                f"commerce_idpay: unexpected response from {url}",
                url=url,
            ) from e
