"""
Error Classification

Defines the error taxonomy for the Fusion+ order lifecycle. Every error
knows the HTTP status it maps to and which pipeline step raised it, so the
HTTP boundary can render it without re-inspecting the cause.
"""

import traceback
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from .constants import VALIDATE_TOKENS_SUGGESTION


class ErrorCategory(str, Enum):
    """Categories of errors surfaced to callers."""

    VALIDATION = "validation"                  # Malformed inbound request
    TOKEN_NOT_SUPPORTED = "token_not_supported"
    UPSTREAM = "upstream"                      # Aggregator rejected or failed
    NETWORK = "network"                        # Aggregator unreachable
    INVALID_UPSTREAM_RESPONSE = "invalid_upstream_response"
    SIGNING = "signing"
    INTERNAL = "internal"


class PipelineStep(str, Enum):
    """Order lifecycle step that produced an error."""

    QUOTE = "quote"
    BUILD = "build"
    SIGN = "sign"
    SUBMIT = "submit"
    STATUS = "status"
    CANCEL = "cancel"
    ACTIVE_ORDERS = "active_orders"
    TOKENS = "tokens"
    BALANCES = "balances"


@dataclass
class ErrorContext:
    """Additional context about an error."""

    url: Optional[str] = None
    params: Optional[Dict[str, Any]] = None
    upstream_status: Optional[int] = None
    upstream_status_text: Optional[str] = None
    payload: Any = None
    suggestion: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


class FusionError(Exception):
    """Base class for classified order lifecycle failures."""

    status_code: int = 500
    category: ErrorCategory = ErrorCategory.INTERNAL
    title: str = "Internal server error"

    def __init__(
        self,
        message: str,
        *,
        step: Optional[PipelineStep] = None,
        status_code: Optional[int] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message)
        self.message = message
        self.step = step
        if status_code is not None:
            self.status_code = status_code
        self.context = context or ErrorContext()

    def error_body(self) -> Any:
        body: Dict[str, Any] = {"message": self.message, "category": self.category.value}
        if self.step is not None:
            body["step"] = self.step.value
        if self.context.details:
            body["details"] = self.context.details
        return body

    def to_envelope(self, *, include_trace: bool = False) -> Dict[str, Any]:
        envelope: Dict[str, Any] = {
            "success": False,
            "message": self.title,
            "error": self.error_body(),
        }
        if self.context.suggestion:
            envelope["suggestion"] = self.context.suggestion
        if include_trace and self.__traceback__ is not None:
            envelope["stack"] = "".join(traceback.format_exception(type(self), self, self.__traceback__))
        return envelope


class OrderValidationError(FusionError):
    """Inbound request failed validation before any upstream call."""

    status_code = 400
    category = ErrorCategory.VALIDATION
    title = "Validation error"

    def __init__(
        self,
        message: str,
        *,
        errors: Optional[List[Dict[str, Any]]] = None,
        step: Optional[PipelineStep] = None,
    ):
        super().__init__(message, step=step)
        self.errors = errors or []

    def to_envelope(self, *, include_trace: bool = False) -> Dict[str, Any]:
        envelope = super().to_envelope(include_trace=include_trace)
        if self.errors:
            envelope["errors"] = self.errors
        return envelope


class TokenNotSupportedError(FusionError):
    """The aggregator explicitly reported a token as unsupported for quoting."""

    status_code = 400
    category = ErrorCategory.TOKEN_NOT_SUPPORTED
    title = "Token not supported"

    def __init__(
        self,
        message: str,
        *,
        src_token: Optional[str] = None,
        dst_token: Optional[str] = None,
        context: Optional[ErrorContext] = None,
    ):
        # Copied so the chained upstream error keeps its own context.
        base = context or ErrorContext()
        context = replace(
            base,
            suggestion=VALIDATE_TOKENS_SUGGESTION,
            details={**base.details, "srcToken": src_token, "dstToken": dst_token},
        )
        super().__init__(message, step=PipelineStep.QUOTE, context=context)

    def error_body(self) -> Any:
        return self.message


class UpstreamError(FusionError):
    """
    Generic aggregator failure.

    The HTTP status mirrors the upstream status, and the upstream body, URL
    and request parameters are forwarded untouched so callers can render
    actionable messages.
    """

    category = ErrorCategory.UPSTREAM
    title = "External API error"

    @property
    def upstream_status(self) -> Optional[int]:
        return self.context.upstream_status

    @property
    def payload(self) -> Any:
        return self.context.payload

    @property
    def is_client_error(self) -> bool:
        """True for 4xx rejections the caller can correct."""
        status = self.context.upstream_status
        return status is not None and 400 <= status < 500

    @property
    def is_retryable(self) -> bool:
        """True for 5xx responses and network failures."""
        status = self.context.upstream_status
        return status is None or status >= 500

    def error_body(self) -> Any:
        body: Dict[str, Any] = {
            "message": self.message,
            "status": self.context.upstream_status,
            "statusText": self.context.upstream_status_text,
            "data": self.context.payload,
            "url": self.context.url,
        }
        if self.context.params:
            body["params"] = self.context.params
        if self.step is not None:
            body["step"] = self.step.value
        return body

    @classmethod
    def from_upstream(cls, exc: "UpstreamError", *, step: PipelineStep, message: Optional[str] = None) -> "UpstreamError":
        """Re-classify a raw upstream failure, keeping its status and body."""
        error = cls(
            message or exc.message,
            step=step,
            status_code=exc.status_code,
            context=exc.context,
        )
        error.category = exc.category
        return error


class QuoteUnavailableError(UpstreamError):
    title = "Quote unavailable"


class SubmissionRejectedError(UpstreamError):
    title = "Order submission rejected"


class CancellationRejectedError(UpstreamError):
    title = "Order cancellation rejected"


class InvalidUpstreamResponseError(FusionError):
    """Upstream returned success with an unusable payload. Never retried."""

    status_code = 502
    category = ErrorCategory.INVALID_UPSTREAM_RESPONSE
    title = "Invalid upstream response"


class SigningError(FusionError):
    """The signer could not be built or refused the payload."""

    status_code = 400
    category = ErrorCategory.SIGNING
    title = "Signing failed"


__all__ = [
    "ErrorCategory",
    "PipelineStep",
    "ErrorContext",
    "FusionError",
    "OrderValidationError",
    "TokenNotSupportedError",
    "UpstreamError",
    "QuoteUnavailableError",
    "SubmissionRejectedError",
    "CancellationRejectedError",
    "InvalidUpstreamResponseError",
    "SigningError",
]
