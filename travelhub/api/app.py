"""FastAPI application for the TravelHub pricing service."""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from travelhub.api.routes import router as pricing_router
from travelhub.utils.logger import (
    bind_request_context,
    clear_request_context,
    get_logger,
    new_request_id,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    logger.info("pricing_api_started")
    yield
    logger.info("pricing_api_stopped")


def create_app() -> FastAPI:
    """Build the pricing API."""
    app = FastAPI(
        title="TravelHub Pricing API",
        description="""
## Booking price calculation

- **Quote** - live price preview for a stay with bundled services
- **Verify** - authoritative recomputation before payment
- **Service orders & cancellations** - tax, fees and refunds
""",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def bind_request_logging(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or new_request_id()
        clear_request_context()
        bind_request_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.debug("request_completed", status_code=response.status_code)
        return response

    app.include_router(pricing_router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "timestamp": datetime.now().isoformat()}

    return app


app = create_app()
