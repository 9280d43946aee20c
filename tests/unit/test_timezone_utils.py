from datetime import datetime, timezone, timedelta

from gymflow.core.timezone_utils import normalize_to_utc, utcnow


def test_normalize_to_utc_naive_is_assumed_utc():
    naive = datetime(2025, 7, 1, 10, 0, 0)
    assert normalize_to_utc(naive) == naive


def test_normalize_to_utc_aware_input():
    # +02:00 debe convertirse a 08:00 UTC sin tzinfo
    aware_dt = datetime(2025, 7, 1, 10, 0, 0, tzinfo=timezone(timedelta(hours=2)))
    utc_dt = normalize_to_utc(aware_dt)
    assert utc_dt.tzinfo is None
    assert utc_dt.hour == 8 and utc_dt.minute == 0


def test_normalize_to_utc_none():
    assert normalize_to_utc(None) is None


def test_utcnow_is_naive_and_close_to_now():
    now = utcnow()
    assert now.tzinfo is None
    reference = datetime.now(timezone.utc).replace(tzinfo=None)
    assert abs((reference - now).total_seconds()) < 5
