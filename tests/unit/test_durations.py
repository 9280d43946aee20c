from datetime import datetime, timedelta

import pytest

from gymflow.core.durations import DurationLabel, VALID_DURATIONS, compute_expiry, parse_duration
from gymflow.core.exceptions import ValidationError


T0 = datetime(2025, 3, 15, 9, 30, 0)


@pytest.mark.parametrize("label", VALID_DURATIONS)
def test_expiry_is_after_start(label):
    assert compute_expiry(label, T0) > T0


def test_week_is_seven_days():
    assert compute_expiry("1 week", T0) == T0 + timedelta(days=7)


def test_months_use_calendar_arithmetic():
    assert compute_expiry("1 month", T0) == datetime(2025, 4, 15, 9, 30, 0)
    assert compute_expiry("3 months", T0) == datetime(2025, 6, 15, 9, 30, 0)
    assert compute_expiry("6 months", T0) == datetime(2025, 9, 15, 9, 30, 0)


def test_one_year_keeps_month_and_day():
    assert compute_expiry("1 year", T0) == datetime(2026, 3, 15, 9, 30, 0)


def test_jan_31_plus_one_month_clamps_to_end_of_february():
    assert compute_expiry("1 month", datetime(2025, 1, 31, 12, 0)) == datetime(2025, 2, 28, 12, 0)
    # Año bisiesto
    assert compute_expiry("1 month", datetime(2024, 1, 31, 12, 0)) == datetime(2024, 2, 29, 12, 0)


def test_feb_29_plus_one_year_clamps_to_feb_28():
    assert compute_expiry("1 year", datetime(2024, 2, 29)) == datetime(2025, 2, 28)


def test_aug_31_plus_six_months():
    assert compute_expiry("6 months", datetime(2025, 8, 31)) == datetime(2026, 2, 28)


def test_accepts_enum_values():
    assert compute_expiry(DurationLabel.ONE_WEEK, T0) == compute_expiry("1 week", T0)


@pytest.mark.parametrize("value", ["2 weeks", "1 Month", "1month", "", None, "30 days"])
def test_unrecognized_label_is_validation_error(value):
    with pytest.raises(ValidationError) as exc_info:
        parse_duration(value)
    assert exc_info.value.status_code == 400
    assert exc_info.value.error_kind == "ValidationError"


def test_compute_expiry_never_defaults():
    with pytest.raises(ValidationError):
        compute_expiry("forever", T0)
