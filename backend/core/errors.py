"""
Error taxonomy for text generation and the quiz pipeline.

Callers decide retry policy from ``kind``; nothing in the core retries or sleeps.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Why a generation call failed."""
    QUOTA_EXCEEDED = "quota_exceeded"
    RATE_LIMITED = "rate_limited"
    MALFORMED_RESPONSE = "malformed_response"
    NETWORK_FAILURE = "network_failure"
    MODEL_NOT_FOUND = "model_not_found"
    UNKNOWN = "unknown"


class GenerationError(Exception):
    """Base error for anything that goes wrong talking to the text generation service."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
    ):
        super().__init__(message)
        self.message = message
        self.stage = stage
        if kind is not None:
            self.kind = kind

    def to_dict(self) -> dict:
        return {
            "stage": self.stage,
            "kind": self.kind.value,
            "message": self.message,
        }


class QuotaExceededError(GenerationError):
    kind = ErrorKind.QUOTA_EXCEEDED


class RateLimitedError(GenerationError):
    kind = ErrorKind.RATE_LIMITED


class MalformedResponseError(GenerationError):
    kind = ErrorKind.MALFORMED_RESPONSE


class NetworkError(GenerationError):
    kind = ErrorKind.NETWORK_FAILURE


class ModelNotFoundError(GenerationError):
    kind = ErrorKind.MODEL_NOT_FOUND


class PipelineError(GenerationError):
    """Terminal failure: the advanced pipeline and its fallback both failed."""


def classify_http_status(status_code: int, body: str = "") -> GenerationError:
    """Map an HTTP error status from the generation service onto the taxonomy."""
    body_lower = (body or "").lower()

    if "quota" in body_lower:
        return QuotaExceededError(f"API quota exceeded (HTTP {status_code})")
    if status_code == 429:
        return RateLimitedError("Rate limit reached (HTTP 429)")
    if status_code == 404:
        return ModelNotFoundError("Model not found (HTTP 404)")
    return GenerationError(f"Text generation service returned HTTP {status_code}")


def error_kind_of(exc: BaseException) -> ErrorKind:
    """Best-effort classification of an arbitrary exception."""
    if isinstance(exc, GenerationError):
        return exc.kind
    if isinstance(exc, TimeoutError):
        return ErrorKind.NETWORK_FAILURE
    return ErrorKind.UNKNOWN
