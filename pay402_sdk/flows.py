"""
Endpoint flows served by the pay402 API.

A flow describes one request shape: HTTP method, path template, body and
how the 402 challenge is settled. :class:`pay402_sdk.PaymentClient` runs
every flow through the same challenge/pay/retry algorithm.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote


class PaymentMode(str, Enum):
    """How a 402 challenge is settled"""
    DIRECT = "direct"
    ESCROW = "escrow"


BodyBuilder = Callable[..., Optional[Dict[str, Any]]]


def _no_body(**_kwargs: Any) -> None:
    return None


def _chat_body(message: str, **_kwargs: Any) -> Dict[str, Any]:
    return {"message": message}


@dataclass(frozen=True)
class EndpointFlow:
    name: str
    method: str
    path_template: str
    payment_mode: PaymentMode
    build_body: BodyBuilder = _no_body
    json_content: bool = False

    def url(self, base_url: str, **path_params: str) -> str:
        """Render the endpoint URL under ``base_url``."""
        quoted = {key: quote(str(value), safe="/") for key, value in path_params.items()}
        return base_url.rstrip("/") + self.path_template.format(**quoted)

    def headers(self) -> Dict[str, str]:
        if self.json_content:
            return {"Content-Type": "application/json"}
        return {}


RESOURCE = EndpointFlow(
    name="resource",
    method="GET",
    path_template="/{slug}",
    payment_mode=PaymentMode.DIRECT,
)

RESOURCE_ESCROW = EndpointFlow(
    name="resource-escrow",
    method="GET",
    path_template="/escrow/{slug}",
    payment_mode=PaymentMode.ESCROW,
)

AGENT_CHAT = EndpointFlow(
    name="agent-chat",
    method="POST",
    path_template="/agent/{agent_slug}/chat",
    payment_mode=PaymentMode.DIRECT,
    build_body=_chat_body,
    json_content=True,
)

AGENT_CHAT_ESCROW = EndpointFlow(
    name="agent-chat-escrow",
    method="POST",
    path_template="/agent/escrow/{agent_slug}/chat",
    payment_mode=PaymentMode.ESCROW,
    build_body=_chat_body,
    json_content=True,
)
