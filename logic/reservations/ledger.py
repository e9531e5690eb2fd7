import logging

from sqlalchemy import text, bindparam, Date
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from logic.errors import ConflictError, InvalidInputError, NotFoundError
from logic.schedule import MAX_DB_INT, normalize_day, slot_sort_key
from models.reservation_model import Reservation, STATUS_CONFIRMED

logger = logging.getLogger(__name__)

SLOT_INDEX = "uq_reservations_confirmed_slot"


def is_slot_collision(error):
    """
    True when ``error`` comes from the one-confirmed-reservation-per-slot
    index. PostgreSQL names the index; SQLite lists its columns.
    """
    message = str(error.orig)
    return SLOT_INDEX in message or (
        "UNIQUE constraint failed: reservations.table_id, reservations.date, reservations.time_slot"
        in message
    )


class ReservationLedger:
    """Reservation records and the read paths over them."""

    def __init__(self, db):
        self.db = db

    def _joined(self):
        return self.db.query(Reservation).options(
            joinedload(Reservation.table),
            joinedload(Reservation.user),
        )

    def get(self, reservation_id):
        reservation = None
        if reservation_id <= MAX_DB_INT:
            reservation = self._joined().filter(Reservation.id == reservation_id).first()
        if reservation is None:
            raise NotFoundError("Reservation not found")
        return reservation

    def find_confirmed(self, table_id, day, time_slot):
        """Id of the confirmed reservation holding (table, day, slot), if any."""
        query = text("""
            SELECT r.id FROM reservations r
            WHERE r.table_id = :table_id
              AND r.date = :day
              AND r.time_slot = :time_slot
              AND r.status = :status
        """).bindparams(bindparam("day", type_=Date))
        return self.db.execute(query, {
            "table_id": table_id,
            "day": day,
            "time_slot": time_slot,
            "status": STATUS_CONFIRMED,
        }).scalar()

    def add(self, reservation):
        """Commit a new reservation; the unique slot index has the last word."""
        self.db.add(reservation)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not is_slot_collision(e):
                raise
            logger.warning(
                "Slot taken concurrently: table %s on %s at %s",
                reservation.table_id, reservation.date, reservation.time_slot,
            )
            raise ConflictError()
        return self.get(reservation.id)

    def list_for_user(self, user_id):
        return (
            self._joined()
            .filter(Reservation.user_id == user_id)
            .order_by(Reservation.date.desc(), Reservation.created_at.desc(), Reservation.id.desc())
            .all()
        )

    def list_all(self):
        return (
            self._joined()
            .order_by(Reservation.date.desc(), Reservation.created_at.desc(), Reservation.id.desc())
            .all()
        )

    def list_for_date(self, day):
        day = normalize_day(day)
        return (
            self._joined()
            .filter(Reservation.date == day)
            .order_by(slot_sort_key(), Reservation.id)
            .all()
        )

    def admin_update(self, reservation_id, update):
        """
        Raw admin edit of date, time slot, guests and status.

        Skips the capacity and conflict checks that booking applies. The
        unique slot index still refuses a second confirmed reservation for
        the same table, day and slot.
        """
        reservation = self.get(reservation_id)
        if update.is_empty():
            raise InvalidInputError("No valid fields were provided to update")

        if update.date is not None:
            reservation.date = update.date
        if update.time_slot is not None:
            reservation.time_slot = update.time_slot
        if update.number_of_guests is not None:
            reservation.number_of_guests = update.number_of_guests
        if update.status is not None:
            reservation.status = update.status

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not is_slot_collision(e):
                raise
            raise ConflictError()

        logger.info(
            "Reservation %s edited by admin: date=%s slot=%s guests=%s status=%s",
            reservation.id, reservation.date, reservation.time_slot,
            reservation.number_of_guests, reservation.status,
        )
        return reservation
