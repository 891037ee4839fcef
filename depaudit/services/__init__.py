"""Service layer — business logic orchestration."""


class ServiceError(Exception):
    """Base service exception."""


class ValidationError(ServiceError):
    """Malformed request input (-> HTTP 400)."""


class NotFoundError(ServiceError):
    """Resource not found or expired (-> HTTP 404)."""


class PayloadTooLargeError(ServiceError):
    """Upload exceeds the configured size limit (-> HTTP 413)."""


class ScanFailedError(ServiceError):
    """Unexpected failure while scanning or rendering (-> HTTP 500)."""
