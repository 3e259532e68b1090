from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import checkout, webhooks
from app.core.config import Settings, settings as default_settings
from app.core.errors import StorefrontError
from app.core.logging import configure_logging
from app.db.record_store import build_record_store
from app.services.fulfillment import FulfillmentRegistry, default_registry
from app.services.payment_gateway import PaymentGateway, build_payment_gateway

logger = logging.getLogger(__name__)

_UNSET = object()


def _cors_headers(request: Request, allowed_origins) -> dict:
    origin = request.headers.get("origin")
    if origin and origin in allowed_origins:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Allow-Methods": "*",
            "Access-Control-Allow-Headers": "*",
        }
    return {}


def create_app(
    settings: Optional[Settings] = None,
    payment_gateway: Optional[PaymentGateway] = None,
    record_store=_UNSET,
    fulfillment: Optional[FulfillmentRegistry] = None,
) -> FastAPI:
    """
    Build the API. Gateway, record store and fulfillment registry are chosen
    here once from configuration; pass them explicitly to override.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Storefront API", version="1.0.0")
    app.state.settings = settings
    app.state.payment_gateway = payment_gateway or build_payment_gateway(settings)
    app.state.record_store = build_record_store(settings) if record_store is _UNSET else record_store
    app.state.fulfillment = fulfillment or default_registry()

    allowed_origins = settings.get_allowed_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
            headers=_cors_headers(request, allowed_origins),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(
            status_code=400,
            content={"error": message},
            headers=_cors_headers(request, allowed_origins),
        )

    # Ensure CORS headers are included even on unhandled exceptions
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
            headers=_cors_headers(request, allowed_origins),
        )

    app.include_router(checkout.router, prefix="/checkout", tags=["checkout"])
    app.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])

    @app.get("/")
    async def root():
        return {"message": "Storefront API", "version": "1.0.0"}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()
