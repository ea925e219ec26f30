from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from craft_pricing.core.timezone import utcnow
from craft_pricing.database.connection import get_db
from craft_pricing.enums.metals import Metal
from craft_pricing.schemas.system import HealthCheckResponse
from craft_pricing.services.price_ledger import get_latest_price

router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthCheckResponse)
def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Lightweight public health check.
    Returns ok + DB connectivity (SELECT 1) and the latest trading day per metal.
    """
    now = utcnow()
    start_time = getattr(request.app.state, "start_time", now)
    uptime_seconds = (now - start_time).total_seconds()

    db_ok = True
    extra = {}
    try:
        db.execute(text("SELECT 1"))
        for metal in Metal:
            latest = get_latest_price(db, metal)
            extra[f"latest_{metal.value}_day"] = latest.trading_day if latest else None
    except SQLAlchemyError as e:
        db_ok = False
        extra["db_error"] = str(e)

    scheduler = getattr(request.app.state, "price_scheduler", None)
    metrics = getattr(request.app.state, "metrics", None) or {}

    return HealthCheckResponse(
        status="ok" if db_ok else "degraded",
        now=now,
        uptime_seconds=uptime_seconds,
        db_ok=db_ok,
        scheduler_running=bool(scheduler and scheduler.is_running),
        requests_count=int(metrics.get("requests", 0)),
        extra=extra or None,
    )
