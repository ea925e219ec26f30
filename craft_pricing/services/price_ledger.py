import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from craft_pricing.core.config import settings
from craft_pricing.core.exceptions import LedgerWriteError
from craft_pricing.core.timezone import (
    local_date_label,
    local_day_bounds,
    start_of_local_day,
    to_naive_utc,
)
from craft_pricing.enums.metals import Metal
from craft_pricing.models.metal_price import ledger_model

logger = logging.getLogger("craft_pricing.ledger")


@dataclass
class UpsertResult:
    saved: bool
    price: float
    daily_change: Optional[str]
    effective_date: datetime


def format_change(diff: float) -> str:
    """Render a price difference as a signed string: ``+120``, ``-45.50``, ``0``."""
    diff = round(diff, 2)
    if diff == 0:
        return "0"
    if float(diff).is_integer():
        return f"{int(diff):+d}"
    return f"{diff:+.2f}"


# --------------------------
# LOOKUPS
# --------------------------
def find_record_for_date(db: Session, metal: Metal, when: datetime) -> Optional[Any]:
    """Return the record whose effective date falls on the local day of ``when``."""
    model = ledger_model(metal)
    start, end = local_day_bounds(when)
    return (
        db.query(model)
        .filter(model.effective_date >= start, model.effective_date < end)
        .first()
    )


def get_latest_price(db: Session, metal: Metal) -> Optional[Any]:
    """The current price: most recent trading day first."""
    model = ledger_model(metal)
    return (
        db.query(model)
        .order_by(model.effective_date.desc(), model.last_scraped_at.desc())
        .first()
    )


def get_price_history(
    db: Session,
    metal: Metal,
    page: int = 1,
    limit: Optional[int] = None,
) -> Tuple[List[Any], int]:
    """
    Returns (items, total_count), newest trading day first.
    page is 1-based.
    """
    if page < 1:
        page = 1
    if limit is None:
        limit = settings.PRICE_HISTORY_DEFAULT_LIMIT
    if limit < 1:
        limit = 1
    if limit > settings.PRICE_HISTORY_MAX_LIMIT:
        limit = settings.PRICE_HISTORY_MAX_LIMIT

    model = ledger_model(metal)
    total = db.query(func.count(model.id)).scalar() or 0

    offset = (page - 1) * limit
    items = (
        db.query(model)
        .order_by(model.effective_date.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return items, total


def _previous_day_change(
    db: Session,
    model,
    effective_date: datetime,
    price: float,
    scraped_change: Optional[str],
) -> Optional[str]:
    """Change versus the latest earlier trading day; falls back to the scraped annotation."""
    previous = (
        db.query(model)
        .filter(model.effective_date < effective_date)
        .order_by(model.effective_date.desc())
        .first()
    )
    if previous is None:
        return scraped_change
    return format_change(price - previous.price_per_tola)


# --------------------------
# DAILY UPSERT
# --------------------------
def upsert_daily_price(
    db: Session,
    metal: Metal,
    price: float,
    scraped_at: datetime,
    daily_change: Optional[str] = None,
) -> UpsertResult:
    """
    Insert or update the single ledger row for the local day of ``scraped_at``.

    - no row for that day: create it (saved)
    - row exists, price differs and this scrape is newer: update in place (saved)
    - otherwise leave it alone (unchanged)

    No lock is taken: the newer-scrape check makes repeated or out-of-order
    writers harmless as long as ``scraped_at`` is stamped at scrape time.
    """
    metal = Metal(metal)
    model = ledger_model(metal)
    scraped_at = to_naive_utc(scraped_at)
    effective_date = start_of_local_day(scraped_at)
    day = local_date_label(effective_date)

    try:
        existing = find_record_for_date(db, metal, scraped_at)

        if existing is None:
            change = _previous_day_change(db, model, effective_date, price, daily_change)
            record = model(
                price_per_tola=price,
                effective_date=effective_date,
                last_scraped_at=scraped_at,
                daily_change=change,
            )
            db.add(record)
            db.commit()
            logger.info("[%s] New price saved: %s on %s", metal.value, price, day)
            return UpsertResult(True, price, change, effective_date)

        if existing.price_per_tola != price and scraped_at > existing.last_scraped_at:
            change = _previous_day_change(db, model, effective_date, price, daily_change)
            old_price = existing.price_per_tola
            existing.price_per_tola = price
            existing.last_scraped_at = scraped_at
            existing.daily_change = change
            db.commit()
            logger.info(
                "[%s] Price updated: %s -> %s on %s", metal.value, old_price, price, day
            )
            return UpsertResult(True, price, change, effective_date)

        if existing.price_per_tola != price:
            logger.warning(
                "[%s] Ignoring stale scrape from %s (stored %s is newer) on %s",
                metal.value,
                scraped_at,
                existing.last_scraped_at,
                day,
            )
        else:
            logger.info("[%s] Price unchanged (%s) on %s", metal.value, price, day)
        return UpsertResult(
            False, existing.price_per_tola, existing.daily_change, existing.effective_date
        )

    except SQLAlchemyError as exc:
        db.rollback()
        raise LedgerWriteError(
            f"Could not write {metal.value} price for {day}: {exc}"
        ) from exc
