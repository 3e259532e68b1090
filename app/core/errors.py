"""
Error taxonomy for the storefront API.

Each error carries the HTTP status it maps to; the handler registered in
app.main renders them as {"error": message}.
"""
from fastapi import status


class StorefrontError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequest(StorefrontError):
    """Client input defect. Never retried."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidSignature(StorefrontError):
    """Webhook payload failed signature verification. Discarded."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid signature"


class GatewayUnavailable(StorefrontError):
    """Payment provider credentials are not configured."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Payment system is not configured"


class StoreUnavailable(StorefrontError):
    """Database is not configured."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database is not configured"


class UnexpectedFailure(StorefrontError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Unexpected failure"
