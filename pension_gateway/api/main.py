"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from pension_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from pension_gateway.api.v1 import flow, history, plans, quote
from pension_gateway.infrastructure.observability.logging import setup_logging
from pension_gateway.config import settings

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="PensionFI Gateway",
        description="Pension plan quotes, validation and plan-creation flows",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(quote.router, prefix="/v1", tags=["quotes"])
    app.include_router(history.router, prefix="/v1", tags=["quotes"])
    app.include_router(flow.router, prefix="/v1", tags=["flows"])
    app.include_router(plans.router, prefix="/v1", tags=["plans"])

    return app


app = create_app()
