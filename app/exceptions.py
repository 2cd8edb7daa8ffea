from typing import Any, Dict, Optional


class StorefrontError(Exception):
    """Base for errors scoped to a single request and reported to the caller."""

    status_code = 400

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra: Dict[str, Any] = extra

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, **self.extra}


class NotFoundError(StorefrontError):
    status_code = 404


class CheckoutSessionExpired(NotFoundError):
    status_code = 410


class InvalidTransitionError(StorefrontError):
    """A status change that the order lifecycle does not allow."""

    status_code = 409

    def __init__(self, message: str, current_status: Optional[str] = None, **extra: Any):
        if current_status is not None:
            extra["current_status"] = current_status
        super().__init__(message, **extra)


class GatewayError(StorefrontError):
    """Payment provider unreachable or returned no usable URL. Retryable."""

    status_code = 502

    def __init__(self, message: str, **extra: Any):
        extra.setdefault("retryable", True)
        super().__init__(message, **extra)


class ValidationError(StorefrontError):
    status_code = 422
