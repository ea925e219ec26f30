from datetime import datetime, timedelta, timezone

import pytest
import pytz
from sqlalchemy.exc import OperationalError

from craft_pricing.core.exceptions import LedgerWriteError
from craft_pricing.enums.metals import Metal
from craft_pricing.models.metal_price import GoldPrice, SilverPrice
from craft_pricing.services.price_ledger import (
    find_record_for_date,
    format_change,
    get_latest_price,
    get_price_history,
    upsert_daily_price,
)

# 2026-10-19 05:10 / 13:45 NPT and 2026-10-20 00:10 NPT, as naive UTC
MORNING = datetime(2026, 10, 18, 23, 25)
AFTERNOON = datetime(2026, 10, 19, 8, 0)
NEXT_DAY_EARLY = datetime(2026, 10, 19, 18, 25)


def test_format_change():
    assert format_change(120) == "+120"
    assert format_change(-45.5) == "-45.50"
    assert format_change(0.001) == "0"


def test_first_scrape_of_the_day_creates_record(db):
    result = upsert_daily_price(db, Metal.silver, price=1500.0, scraped_at=MORNING, daily_change="+15")

    assert result.saved is True
    assert result.effective_date == datetime(2026, 10, 18, 18, 15)
    # No earlier day to compare against: the scraped annotation is kept
    assert result.daily_change == "+15"
    assert db.query(SilverPrice).count() == 1


def test_same_price_again_is_idempotent(db):
    upsert_daily_price(db, Metal.silver, price=1500.0, scraped_at=MORNING)
    result = upsert_daily_price(db, Metal.silver, price=1500.0, scraped_at=MORNING + timedelta(minutes=15))

    assert result.saved is False
    assert db.query(SilverPrice).count() == 1


def test_new_price_same_day_updates_in_place(db):
    upsert_daily_price(db, Metal.silver, price=1500.0, scraped_at=MORNING)
    result = upsert_daily_price(db, Metal.silver, price=1520.0, scraped_at=AFTERNOON)

    assert result.saved is True
    records = db.query(SilverPrice).all()
    assert len(records) == 1
    assert records[0].price_per_tola == 1520.0
    assert records[0].last_scraped_at == AFTERNOON


def test_stale_scrape_does_not_overwrite_newer_value(db):
    upsert_daily_price(db, Metal.silver, price=1520.0, scraped_at=AFTERNOON)
    result = upsert_daily_price(db, Metal.silver, price=1500.0, scraped_at=MORNING)

    assert result.saved is False
    assert result.price == 1520.0
    assert get_latest_price(db, Metal.silver).price_per_tola == 1520.0


def test_after_local_midnight_starts_a_new_day(db):
    upsert_daily_price(db, Metal.silver, price=1500.0, scraped_at=AFTERNOON)
    result = upsert_daily_price(db, Metal.silver, price=1620.0, scraped_at=NEXT_DAY_EARLY)

    assert result.saved is True
    assert result.daily_change == "+120"
    assert db.query(SilverPrice).count() == 2

    latest = get_latest_price(db, Metal.silver)
    assert latest.price_per_tola == 1620.0
    assert latest.trading_day == "2026-10-20"


def test_find_record_for_date_uses_local_day(db):
    upsert_daily_price(db, Metal.gold, price=186000.0, scraped_at=MORNING)

    assert find_record_for_date(db, Metal.gold, AFTERNOON) is not None
    assert find_record_for_date(db, Metal.gold, NEXT_DAY_EARLY) is None


def test_metals_have_separate_ledgers(db):
    upsert_daily_price(db, Metal.silver, price=1500.0, scraped_at=MORNING)
    upsert_daily_price(db, Metal.gold, price=186000.0, scraped_at=MORNING)

    assert db.query(SilverPrice).count() == 1
    assert db.query(GoldPrice).count() == 1
    assert get_latest_price(db, Metal.gold).price_per_tola == 186000.0


def test_latest_price_is_none_on_empty_ledger(db):
    assert get_latest_price(db, Metal.gold) is None


def test_history_is_newest_first_and_paginated(db):
    for day in range(5):
        upsert_daily_price(db, Metal.silver, price=1500.0 + day, scraped_at=MORNING + timedelta(days=day))

    items, total = get_price_history(db, Metal.silver, page=1, limit=2)
    assert total == 5
    assert [r.price_per_tola for r in items] == [1504.0, 1503.0]

    items, _ = get_price_history(db, Metal.silver, page=3, limit=2)
    assert [r.price_per_tola for r in items] == [1500.0]


def test_aware_timestamps_are_stored_as_naive_utc(db):
    first = datetime(2026, 10, 19, 2, 0, tzinfo=timezone.utc)
    later = pytz.timezone("Asia/Kathmandu").localize(datetime(2026, 10, 19, 8, 45))  # 03:00 UTC

    upsert_daily_price(db, Metal.silver, price=1500.0, scraped_at=first)
    result = upsert_daily_price(db, Metal.silver, price=1510.0, scraped_at=later)

    assert result.saved is True
    record = get_latest_price(db, Metal.silver)
    assert record.price_per_tola == 1510.0
    assert record.last_scraped_at == datetime(2026, 10, 19, 3, 0)
    assert record.last_scraped_at.tzinfo is None

    # An aware timestamp older than the stored one is still rejected as stale
    stale = upsert_daily_price(db, Metal.silver, price=1490.0, scraped_at=first)
    assert stale.saved is False


def test_failed_commit_rolls_back_and_raises_ledger_error(db, monkeypatch):
    def failing_commit():
        raise OperationalError("INSERT INTO silver_prices", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", failing_commit)

    with pytest.raises(LedgerWriteError) as exc_info:
        upsert_daily_price(db, Metal.silver, price=1500.0, scraped_at=MORNING)

    assert "silver" in str(exc_info.value)
    assert "2026-10-19" in str(exc_info.value)
    monkeypatch.undo()
    assert db.query(SilverPrice).count() == 0
