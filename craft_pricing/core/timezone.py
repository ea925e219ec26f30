"""
Local-day arithmetic for the price ledger.

Every price record is bucketed by the calendar day in Nepal (UTC+5:45).
Timestamps are stored as naive UTC datetimes, so a local midnight is kept
as the equivalent UTC instant (e.g. 2026-10-19 00:00 NPT -> 2026-10-18 18:15).
"""

from datetime import datetime, timedelta, timezone

import pytz

LOCAL_TIMEZONE = pytz.timezone("Asia/Kathmandu")
ONE_DAY = timedelta(days=1)


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(ts: datetime) -> datetime:
    """Normalise to the storage convention; naive values are already UTC."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(pytz.utc).replace(tzinfo=None)


def to_local(ts: datetime) -> datetime:
    """
    Convert a timestamp to local time.

    Naive values are treated as UTC, matching how they are stored.
    """
    if ts.tzinfo is None:
        ts = pytz.utc.localize(ts)
    return ts.astimezone(LOCAL_TIMEZONE)


def start_of_local_day(ts: datetime) -> datetime:
    """
    Return the start of the local calendar day containing ``ts``,
    as a naive UTC datetime.
    """
    local = to_local(ts)
    midnight = LOCAL_TIMEZONE.localize(
        datetime(local.year, local.month, local.day)
    )
    return midnight.astimezone(pytz.utc).replace(tzinfo=None)


def local_day_bounds(ts: datetime) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` UTC range of the local day containing ``ts``."""
    start = start_of_local_day(ts)
    return start, start + ONE_DAY


def local_date_label(effective_date: datetime) -> str:
    """ISO date of the local trading day an ``effective_date`` stands for."""
    return to_local(effective_date).date().isoformat()
