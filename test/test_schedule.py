import time
from datetime import date, datetime, timedelta, timezone

import pytest

from logic.errors import InvalidInputError
from logic.schedule import (
    MAX_DB_INT,
    normalize_day,
    parse_positive_int,
    validate_status,
    validate_time_slot,
)
from logic.updates import ReservationUpdate, TableUpdate


@pytest.fixture
def lima_clock(monkeypatch):
    """Process-local time pinned to UTC-5 (no DST)."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "PET5")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


class TestNormalizeDay:

    def test_plain_iso_date(self):
        assert normalize_day("2025-01-20") == date(2025, 1, 20)

    def test_time_of_day_is_stripped(self):
        assert normalize_day("2025-01-20T21:45:00") == date(2025, 1, 20)
        assert normalize_day(datetime(2025, 1, 20, 23, 59)) == date(2025, 1, 20)

    def test_date_passes_through(self):
        assert normalize_day(date(2025, 3, 1)) == date(2025, 3, 1)

    @pytest.mark.parametrize("value", ["", "   ", None, "20-01-2025", "2025-13-40", 20250120])
    def test_rejects_malformed(self, value):
        with pytest.raises(InvalidInputError):
            normalize_day(value)


def test_time_slots_must_be_enumerated():
    assert validate_time_slot("7:00 PM") == "7:00 PM"
    with pytest.raises(InvalidInputError) as exc:
        validate_time_slot("7:30 PM")
    assert "11:00 AM" in exc.value.message


def test_status_must_be_enumerated():
    assert validate_status("cancelled") == "cancelled"
    with pytest.raises(InvalidInputError):
        validate_status("pending")


def test_positive_int_accepts_digit_strings():
    assert parse_positive_int("4", "guests") == 4
    assert parse_positive_int(2, "guests") == 2
    for bad in (0, -1, "zero", True, 2.5, None):
        with pytest.raises(InvalidInputError):
            parse_positive_int(bad, "guests")


class TestUpdatePayloads:

    def test_table_update_keeps_absent_fields_empty(self):
        update = TableUpdate.from_payload({"is_active": False})
        assert update.capacity is None
        assert update.is_active is False
        assert not update.is_empty()

    def test_table_update_rejects_non_boolean_flag(self):
        with pytest.raises(InvalidInputError):
            TableUpdate.from_payload({"is_active": "no"})

    def test_table_update_rejects_unknown_fields(self):
        with pytest.raises(InvalidInputError):
            TableUpdate.from_payload({"table_number": 9})

    def test_reservation_update_normalizes_date(self):
        update = ReservationUpdate.from_payload({"date": "2025-02-01T18:00:00", "time_slot": "8:00 PM"})
        assert update.date == date(2025, 2, 1)
        assert update.time_slot == "8:00 PM"
        assert update.number_of_guests is None
        assert update.status is None

    def test_empty_reservation_update(self):
        assert ReservationUpdate.from_payload({}).is_empty()


class TestOffsetDatetimes:

    def test_utc_offset_is_converted_to_local_day(self, lima_clock):
        assert normalize_day("2025-01-21T02:00:00+00:00") == date(2025, 1, 20)

    def test_aware_datetime_object(self, lima_clock):
        moment = datetime(2025, 1, 21, 2, 0, tzinfo=timezone.utc)
        assert normalize_day(moment) == date(2025, 1, 20)

    def test_local_offset_keeps_its_day(self, lima_clock):
        lima = timezone(timedelta(hours=-5))
        assert normalize_day(datetime(2025, 1, 20, 23, 30, tzinfo=lima)) == date(2025, 1, 20)

    def test_naive_datetime_is_already_local(self, lima_clock):
        assert normalize_day("2025-01-21T02:00:00") == date(2025, 1, 21)


class TestPositiveIntEdges:

    @pytest.mark.parametrize("value", ["²", "٣", "１２", "4²"])
    def test_non_ascii_digits_rejected(self, value):
        with pytest.raises(InvalidInputError):
            parse_positive_int(value, "guests")

    def test_column_maximum_accepted(self):
        assert parse_positive_int(MAX_DB_INT, "table_id") == MAX_DB_INT
        assert parse_positive_int(str(MAX_DB_INT), "table_id") == MAX_DB_INT

    @pytest.mark.parametrize("value", [MAX_DB_INT + 1, 10**25, "9" * 25])
    def test_above_column_maximum_rejected(self, value):
        with pytest.raises(InvalidInputError) as exc:
            parse_positive_int(value, "table_id")
        assert "must not exceed" in exc.value.message

    def test_unbounded_when_asked(self):
        assert parse_positive_int("9" * 25, "guests", maximum=None) == int("9" * 25)

    def test_absurdly_long_digit_string(self):
        with pytest.raises(InvalidInputError):
            parse_positive_int("9" * 5000, "guests")
