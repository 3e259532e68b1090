from pydantic_settings import BaseSettings
from typing import Optional, List


def _parse_allowed_origins(v: str) -> List[str]:
    """Parse comma-separated origins string; strip whitespace; keep non-empty."""
    if not v or not v.strip():
        return []
    return [o.strip() for o in v.split(",") if o.strip()]


_DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


class Settings(BaseSettings):
    # Storefront
    APP_URL: str = "http://localhost:3000"  # Base URL for default checkout redirects

    # CORS: comma-separated extra origins for production storefront domains
    ALLOWED_ORIGINS_EXTRA: str = ""

    def get_allowed_origins(self) -> List[str]:
        """Return CORS allowed origins: default localhost + ALLOWED_ORIGINS_EXTRA."""
        return _DEFAULT_CORS_ORIGINS + _parse_allowed_origins(self.ALLOWED_ORIGINS_EXTRA)

    # Payments
    PAYMENT_BACKEND: str = "stripe"  # "stripe" or "mock"
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_PUBLISHABLE_KEY: Optional[str] = None
    STRIPE_WEBHOOK_SECRET: Optional[str] = None  # Webhook signing secret for signature verification

    # Database
    DATABASE_URL: Optional[str] = None  # "memory://" selects the in-memory record store
    DATABASE_KEY: Optional[str] = None  # Password used when DATABASE_URL carries none

    # Fulfillment
    ORDER_IDEMPOTENCY_CHECK: bool = False  # Skip orders already recorded for a payment intent

    # Logging
    LOG_LEVEL: str = "INFO"

    def default_success_url(self) -> str:
        return f"{self.APP_URL.rstrip('/')}/success"

    def default_cancel_url(self) -> str:
        return f"{self.APP_URL.rstrip('/')}/cancel"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        # Environment variables take precedence over the .env file


settings = Settings()
