"""
Booking Service

Validates booking requests, commits reservations and handles
cancellation. Identity and "today" always come in as arguments.
"""
import logging
from datetime import date

from logic.errors import (
    AlreadyCancelledError,
    CapacityExceededError,
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    PastDateError,
    TableInactiveError,
)
from logic.reservations.ledger import ReservationLedger
from logic.schedule import normalize_day, parse_positive_int, validate_time_slot
from models.reservation_model import Reservation, STATUS_CANCELLED, STATUS_CONFIRMED
from models.table_model import DiningTable
from models.user_model import ROLE_ADMIN

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("table_id", "date", "time_slot", "number_of_guests")


class BookingService:

    def __init__(self, db, today=None):
        self.db = db
        self.today = today or date.today
        self.ledger = ReservationLedger(db)

    def book(self, user_id, table_id, day, time_slot, party_size):
        """
        Reserve ``table_id`` for ``party_size`` guests on (day, time_slot).

        Checks run in a fixed order: input, past date, table exists, table
        active, capacity, conflict. Returns the reservation with table and
        user joined.
        """
        # 1. Validate required fields
        if any(value in (None, "") for value in (table_id, day, time_slot, party_size)):
            raise InvalidInputError(
                f"Please provide all required fields: {', '.join(REQUIRED_FIELDS)}"
            )
        table_id = parse_positive_int(table_id, "table_id")
        day = normalize_day(day)
        time_slot = validate_time_slot(time_slot)
        party_size = parse_positive_int(party_size, "number_of_guests")

        # 2. Same-day bookings are fine at any hour
        if day < self.today():
            raise PastDateError()

        # 3-4. Table exists and is active; the row lock serializes bookings per table
        table = (
            self.db.query(DiningTable)
            .filter(DiningTable.id == table_id)
            .with_for_update()
            .first()
        )
        if table is None:
            self.db.rollback()
            raise NotFoundError("Table not found")
        if not table.is_active:
            self.db.rollback()
            raise TableInactiveError()

        # 5. Capacity
        if table.capacity < party_size:
            self.db.rollback()
            raise CapacityExceededError(table.capacity)

        # 6. Conflicting confirmed reservation
        if self.ledger.find_confirmed(table.id, day, time_slot) is not None:
            self.db.rollback()
            raise ConflictError()

        # 7. Commit
        reservation = self.ledger.add(Reservation(
            user_id=user_id,
            table_id=table.id,
            date=day,
            time_slot=time_slot,
            number_of_guests=party_size,
            status=STATUS_CONFIRMED,
        ))
        logger.info(
            "Reservation %s confirmed: user %s, table %s, %s at %s, %s guests",
            reservation.id, user_id, reservation.table.table_number,
            day.isoformat(), time_slot, party_size,
        )
        return reservation

    def cancel(self, actor_id, actor_role, reservation_id):
        """Cancel a reservation. Owners cancel their own; admins cancel any."""
        reservation = self.ledger.get(reservation_id)

        if actor_role != ROLE_ADMIN and reservation.user_id != actor_id:
            raise ForbiddenError("Not authorized to cancel this reservation")

        if reservation.status == STATUS_CANCELLED:
            raise AlreadyCancelledError()

        reservation.status = STATUS_CANCELLED
        self.db.commit()

        logger.info(
            "Reservation %s cancelled by %s %s", reservation.id, actor_role, actor_id
        )
        return reservation
