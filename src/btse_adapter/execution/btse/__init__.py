"""BTSE exchange implementation."""

from btse_adapter.execution.btse.exchange import BTSEExchange
from btse_adapter.execution.btse.router import EndpointRouter, Route, Surface
from btse_adapter.execution.btse.signer import RequestSigner
from btse_adapter.execution.btse.transport import AiohttpTransport, HttpTransport

__all__ = [
    "AiohttpTransport",
    "BTSEExchange",
    "EndpointRouter",
    "HttpTransport",
    "RequestSigner",
    "Route",
    "Surface",
]
