"""Partial-update payloads for the admin edit flows."""
from dataclasses import dataclass, fields
import datetime
from typing import Optional

from logic.errors import InvalidInputError
from logic.schedule import normalize_day, parse_positive_int, validate_status, validate_time_slot


def _reject_unknown(payload, allowed):
    if not isinstance(payload, dict):
        raise InvalidInputError("Request body must be a JSON object")
    unknown = sorted(set(payload) - set(allowed))
    if unknown:
        raise InvalidInputError(f"Unknown fields: {', '.join(unknown)}")


@dataclass(frozen=True)
class TableUpdate:
    capacity: Optional[int] = None
    is_active: Optional[bool] = None

    @classmethod
    def from_payload(cls, payload):
        _reject_unknown(payload, ("capacity", "is_active"))

        capacity = payload.get("capacity")
        if capacity is not None:
            capacity = parse_positive_int(capacity, "capacity")

        is_active = payload.get("is_active")
        if is_active is not None and not isinstance(is_active, bool):
            raise InvalidInputError("is_active must be true or false")

        return cls(capacity=capacity, is_active=is_active)

    def is_empty(self):
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass(frozen=True)
class ReservationUpdate:
    date: Optional[datetime.date] = None
    time_slot: Optional[str] = None
    number_of_guests: Optional[int] = None
    status: Optional[str] = None

    @classmethod
    def from_payload(cls, payload):
        _reject_unknown(payload, ("date", "time_slot", "number_of_guests", "status"))

        day = payload.get("date")
        time_slot = payload.get("time_slot")
        guests = payload.get("number_of_guests")
        status = payload.get("status")

        return cls(
            date=normalize_day(day) if day is not None else None,
            time_slot=validate_time_slot(time_slot) if time_slot is not None else None,
            number_of_guests=parse_positive_int(guests, "number_of_guests") if guests is not None else None,
            status=validate_status(status) if status is not None else None,
        )

    def is_empty(self):
        return all(getattr(self, f.name) is None for f in fields(self))
