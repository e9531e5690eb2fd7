"""Time slot and calendar-day helpers shared by availability and booking."""
from datetime import date, datetime

from sqlalchemy import case

from logic.errors import InvalidInputError
from models.reservation_model import Reservation, TIME_SLOTS, STATUSES

SLOT_ORDER = {slot: position for position, slot in enumerate(TIME_SLOTS)}

# Largest value an Integer column holds
MAX_DB_INT = 2**31 - 1


def normalize_day(value):
    """
    Reduce ``value`` to its calendar-day key.

    Accepts ``date``/``datetime`` objects and ISO 8601 strings, with or
    without a time part ("2025-01-20", "2025-01-20T19:30:00"). A datetime
    carrying a UTC offset is converted to local time before the day is taken.
    """
    if isinstance(value, datetime):
        return _local_day(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError("A valid date is required (YYYY-MM-DD)")

    raw = value.strip()
    try:
        if len(raw) == 10:
            return date.fromisoformat(raw)
        return _local_day(datetime.fromisoformat(raw))
    except ValueError:
        raise InvalidInputError(f"Invalid date format: {raw}. Use YYYY-MM-DD")


def _local_day(moment):
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def validate_time_slot(value):
    if value not in SLOT_ORDER:
        raise InvalidInputError(
            f"Invalid time slot: {value}. Choose one of: {', '.join(TIME_SLOTS)}"
        )
    return value


def validate_status(value):
    if value not in STATUSES:
        raise InvalidInputError(f"Invalid status: {value}. Choose one of: {', '.join(STATUSES)}")
    return value


def parse_positive_int(value, field, maximum=MAX_DB_INT):
    """
    Integers (or ASCII digit strings from query args) greater than zero.

    Values above ``maximum`` are rejected; pass ``maximum=None`` to accept
    any size.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a positive integer")
    if isinstance(value, str):
        raw = value.strip()
        if not (raw.isascii() and raw.isdigit()):
            raise InvalidInputError(f"{field} must be a positive integer")
        try:
            value = int(raw)
        except ValueError:
            # More digits than int() converts
            raise InvalidInputError(f"{field} must be a positive integer")
    if not isinstance(value, int) or value < 1:
        raise InvalidInputError(f"{field} must be a positive integer")
    if maximum is not None and value > maximum:
        raise InvalidInputError(f"{field} must not exceed {maximum}")
    return value


def slot_sort_key():
    """SQL expression ordering reservations by slot-list position."""
    return case(SLOT_ORDER, value=Reservation.time_slot, else_=len(TIME_SLOTS))
