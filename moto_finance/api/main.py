"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from moto_finance.api.middleware import RequestIDMiddleware, MetricsMiddleware
from moto_finance.api.v1 import financing, promotions
from moto_finance.infrastructure.database.models import Base
from moto_finance.infrastructure.database.session import engine
from moto_finance.infrastructure.observability.logging import setup_logging
from moto_finance.config import settings

setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Build the API with health, metrics, financing and promotion routes"""
    app = FastAPI(
        title="Moto Finance",
        description="Motorcycle pricing, banking promotions and current-account financing",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Request id must be set before metrics middleware logs it
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(financing.router, prefix="/v1", tags=["financing"])
    app.include_router(promotions.router, prefix="/v1", tags=["promotions"])

    return app


app = create_app()
