from datetime import datetime, time, timezone

import pytest

from docket.domain.workorders.time_calculator import (
    format_date_for_input,
    format_local_hour,
    local_day_start,
    parse_hour,
    reconcile_schedule,
    validate_tz_offset,
)

UTC_MINUS_5 = 300


@pytest.mark.parametrize(
    "value,expected",
    [
        ("14:30", time(14, 30)),
        ("9:05", time(9, 5)),
        ("2:30 PM", time(14, 30)),
        ("2:30pm", time(14, 30)),
        ("12:00 AM", time(0, 0)),
        ("2PM", time(14, 0)),
    ],
)
def test_parse_hour_formats(value, expected) -> None:
    assert parse_hour(value) == expected


def test_blank_hour_means_not_provided() -> None:
    assert parse_hour(None) is None
    assert parse_hour("   ") is None


@pytest.mark.parametrize("value", ["25:00", "noon", "14h30", "14:30:00", "9:5", "14"])
def test_invalid_hour_rejected(value) -> None:
    with pytest.raises(ValueError):
        parse_hour(value)


def test_day_job_shifted_to_utc() -> None:
    window = reconcile_schedule(
        datetime(2024, 3, 10), start_hour="09:00", end_hour="5:00 PM", tz_offset=UTC_MINUS_5
    )

    assert window.start == datetime(2024, 3, 10, 14, 0)
    assert window.end == datetime(2024, 3, 10, 22, 0)
    assert window.start_hour == "09:00"
    assert window.end_hour == "17:00"
    assert window.duration_hours == 8


def test_overnight_job_rolls_end_to_next_day() -> None:
    window = reconcile_schedule(
        datetime(2024, 3, 10), start_hour="22:00", end_hour="02:00", tz_offset=UTC_MINUS_5
    )

    assert window.start == datetime(2024, 3, 11, 3, 0)
    assert window.end == datetime(2024, 3, 11, 7, 0)
    assert window.duration_hours == 4


def test_explicit_end_date_is_not_rolled_over() -> None:
    with pytest.raises(ValueError, match="End time must be after start time"):
        reconcile_schedule(
            datetime(2024, 3, 10),
            end_date=datetime(2024, 3, 10),
            start_hour="22:00",
            end_hour="02:00",
        )


def test_end_before_start_without_hours_rejected() -> None:
    with pytest.raises(ValueError):
        reconcile_schedule(datetime(2024, 3, 10, 12), end_date=datetime(2024, 3, 9, 12))


def test_equal_start_and_end_allowed_with_explicit_dates() -> None:
    window = reconcile_schedule(datetime(2024, 3, 10, 12), end_date=datetime(2024, 3, 10, 12))
    assert window.duration_hours == 0


def test_aware_start_uses_local_calendar_day() -> None:
    # 03:00 UTC on the 10th is still the evening of the 9th at UTC-5
    start = datetime(2024, 3, 10, 3, 0, tzinfo=timezone.utc)
    window = reconcile_schedule(start, start_hour="08:00", tz_offset=UTC_MINUS_5)

    assert window.start == datetime(2024, 3, 9, 13, 0)
    assert window.end is None
    assert window.end_hour is None


def test_without_hours_datetimes_are_kept_and_hours_derived() -> None:
    window = reconcile_schedule(
        datetime(2024, 3, 10, 15, 0, tzinfo=timezone.utc),
        end_date=datetime(2024, 3, 10, 18, 30, tzinfo=timezone.utc),
        tz_offset=UTC_MINUS_5,
    )

    assert window.start == datetime(2024, 3, 10, 15, 0)
    assert window.end == datetime(2024, 3, 10, 18, 30)
    assert window.start_hour == "10:00"
    assert window.end_hour == "13:30"


def test_east_of_utc_offsets_are_negative() -> None:
    # UTC+2 is -120 in the browser convention
    window = reconcile_schedule(datetime(2024, 3, 10), start_hour="01:00", tz_offset=-120)
    assert window.start == datetime(2024, 3, 9, 23, 0)


def test_out_of_range_offset_rejected() -> None:
    with pytest.raises(ValueError):
        validate_tz_offset(900)
    with pytest.raises(ValueError):
        reconcile_schedule(datetime(2024, 3, 10), tz_offset=-900)


def test_form_formatting_in_local_time() -> None:
    stored = datetime(2024, 3, 10, 14, 0)

    assert format_date_for_input(stored, UTC_MINUS_5) == "2024-03-10T09:00"
    assert format_date_for_input(None, UTC_MINUS_5) == ""
    assert format_local_hour(stored, UTC_MINUS_5) == "09:00"


def test_local_day_start() -> None:
    now = datetime(2024, 3, 10, 3, 0, tzinfo=timezone.utc)
    assert local_day_start(now, UTC_MINUS_5) == datetime(2024, 3, 9, 5, 0)
    assert local_day_start(now, 0) == datetime(2024, 3, 10, 0, 0)
