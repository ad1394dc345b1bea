"""FastAPI application factory."""

from fastapi import FastAPI, Request, Response

from horizontas.observability.correlation import (
    CORRELATION_ID_HEADER,
    correlation_id_from_header,
    reset_correlation_id,
    set_correlation_id,
)
from horizontas.observability.logging import configure_logging

from .routers import public
from .routes import apartments, checkout, coupons


def create_app() -> FastAPI:
    """Create the booking API with correlation-ID middleware and all routes."""
    configure_logging()

    app = FastAPI(
        title="Horizontas",
        docs_url=None,
        redoc_url=None,
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = correlation_id_from_header(request.headers.get(CORRELATION_ID_HEADER))
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            reset_correlation_id(token)

    app.include_router(public.router)
    app.include_router(apartments.router)
    app.include_router(coupons.router)
    app.include_router(checkout.router)

    return app
