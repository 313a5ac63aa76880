"""Request-scoped collaborators handed to the payment gateways."""

from typing import Optional

import requests
from fastapi import Request

from app.payments.base import MessageBag

_http_session: Optional[requests.Session] = None


def get_http_session() -> requests.Session:
    """Shared requests.Session (connection pooling towards the processor)."""
    global _http_session
    if _http_session is None:
        _http_session = requests.Session()
    return _http_session


def get_messages(request: Request) -> MessageBag:
    """One MessageBag per request, also read by the error handlers."""
    messages = getattr(request.state, "messages", None)
    if messages is None:
        messages = MessageBag()
        request.state.messages = messages
    return messages
