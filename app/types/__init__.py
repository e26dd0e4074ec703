from .requests import (
    CancelOrderRequest,
    CreateOrderRequest,
    FromWeiRequest,
    QuoteRequest,
    SubmitOrderRequest,
    TokenPairRequest,
    ToWeiRequest,
)
from .responses import ApiEnvelope, fail, ok

__all__ = [
    "ApiEnvelope",
    "CancelOrderRequest",
    "CreateOrderRequest",
    "FromWeiRequest",
    "QuoteRequest",
    "SubmitOrderRequest",
    "TokenPairRequest",
    "ToWeiRequest",
    "fail",
    "ok",
]
