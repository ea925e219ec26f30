import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from craft_pricing.core.config import settings
from craft_pricing.core.exceptions import PricingError
from craft_pricing.core.logging_config import setup_logging
from craft_pricing.core.timezone import utcnow
from craft_pricing.database.connection import Base, engine
from craft_pricing.middleware.metrics import MetricsMiddleware, new_metrics
from craft_pricing.models import cart, metal_price, order, product, user  # noqa: F401  (register tables)
from craft_pricing.routes import system
from craft_pricing.routes.auth import router as auth_router
from craft_pricing.routes.cart import router as cart_router
from craft_pricing.routes.metal_prices import router as metal_prices_router
from craft_pricing.routes.orders import router as orders_router
from craft_pricing.routes.products import router as product_router
from craft_pricing.services.price_update_service import build_price_update_service
from craft_pricing.services.scheduler_service import build_price_scheduler

logger = logging.getLogger("craft_pricing.app")

app = FastAPI(title="Welcome-Craft Metal Pricing Service")

app.add_middleware(MetricsMiddleware)


@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"message": "Price update failed", "error": str(exc)},
    )


app.include_router(auth_router)
app.include_router(product_router)
app.include_router(cart_router)
app.include_router(orders_router)
app.include_router(system.router)
# /api/{metal}/... is a catch-all on its segment; keep it after the fixed prefixes
app.include_router(metal_prices_router)


@app.on_event("startup")
async def startup_event():
    setup_logging()
    Base.metadata.create_all(bind=engine)

    app.state.start_time = utcnow()
    app.state.metrics = new_metrics()
    app.state.price_update_service = build_price_update_service(settings)
    app.state.price_scheduler = None

    if settings.SCHEDULER_ENABLED:
        scheduler = build_price_scheduler(app.state.price_update_service, settings)
        scheduler.start()
        app.state.price_scheduler = scheduler
    else:
        logger.info("Price scheduler disabled (SCHEDULER_ENABLED=false)")


@app.on_event("shutdown")
async def shutdown_event():
    scheduler = getattr(app.state, "price_scheduler", None)
    if scheduler is not None:
        await scheduler.stop()
