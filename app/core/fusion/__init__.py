"""
Fusion+ Order Lifecycle

Quote → build → sign → submit orchestration for 1inch Fusion+ cross-chain
orders, plus the signing adapter and error taxonomy it relies on.
"""

from .errors import (
    CancellationRejectedError,
    ErrorCategory,
    ErrorContext,
    FusionError,
    InvalidUpstreamResponseError,
    OrderValidationError,
    PipelineStep,
    QuoteUnavailableError,
    SigningError,
    SubmissionRejectedError,
    TokenNotSupportedError,
    UpstreamError,
)
from .models import (
    CreatedOrder,
    FusionQuote,
    LimitOrder,
    SignedOrder,
    SubmittedOrder,
    SwapIntent,
    TokenPairValidation,
    TypedDataDomain,
    UnsignedOrder,
)
from .orchestrator import FusionOrderManager
from .secret_hashes import generate_secret_hashes
from .signing import ChainResourceCache, SigningAdapter

__all__ = [
    # Errors
    "CancellationRejectedError",
    "ErrorCategory",
    "ErrorContext",
    "FusionError",
    "InvalidUpstreamResponseError",
    "OrderValidationError",
    "PipelineStep",
    "QuoteUnavailableError",
    "SigningError",
    "SubmissionRejectedError",
    "TokenNotSupportedError",
    "UpstreamError",
    # Models
    "CreatedOrder",
    "FusionQuote",
    "LimitOrder",
    "SignedOrder",
    "SubmittedOrder",
    "SwapIntent",
    "TokenPairValidation",
    "TypedDataDomain",
    "UnsignedOrder",
    # Services
    "FusionOrderManager",
    "ChainResourceCache",
    "SigningAdapter",
    "generate_secret_hashes",
]
