"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finhub_gateway.api.errors import register_exception_handlers
from finhub_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finhub_gateway.api.v1 import advanced, analytics, bank_analytics, ingestion
from finhub_gateway.infrastructure.observability.logging import setup_logging
from finhub_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="FinHub Analytics Gateway",
        description="Financial metrics, personality, credit score and bank comparison service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(ingestion.router, prefix="/v1", tags=["ingestion"])
    app.include_router(analytics.router, prefix="/v1", tags=["analytics"])
    app.include_router(advanced.router, prefix="/v1", tags=["advanced"])
    app.include_router(bank_analytics.router, prefix="/v1", tags=["bank-analytics"])

    return app


app = create_app()
