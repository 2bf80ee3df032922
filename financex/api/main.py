"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from financex.api.middleware import RequestIDMiddleware, MetricsMiddleware
from financex.api.v1 import transactions, projection, debts, investments
from financex.infrastructure.database.models import Base
from financex.infrastructure.database.session import engine
from financex.infrastructure.observability.logging import setup_logging
from financex.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="FinanceX API",
        description="Personal finance tracking: transactions, month-end projection and debt ledger",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)

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
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(projection.router, prefix="/v1", tags=["projection"])
    app.include_router(debts.router, prefix="/v1", tags=["debts"])
    app.include_router(investments.router, prefix="/v1", tags=["investments"])

    return app


app = create_app()
