"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from backoffice.api.middleware import MetricsMiddleware, RequestIDMiddleware
from backoffice.api.v1 import fees, risk
from backoffice.config import settings
from backoffice.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Back-office Fee & Risk Service",
        description="Transaction fee quotes and merchant risk scoring for the admin dashboard",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(fees.router, prefix="/v1", tags=["fees"])
    app.include_router(risk.router, prefix="/v1", tags=["risk"])

    return app


app = create_app()
