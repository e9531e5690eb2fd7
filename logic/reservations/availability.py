from sqlalchemy import text, bindparam, select, Boolean, Date

from logic.schedule import MAX_DB_INT, normalize_day, parse_positive_int, validate_time_slot
from models.reservation_model import STATUS_CONFIRMED
from models.table_model import DiningTable


class AvailabilityEngine:

    def __init__(self, db):
        self.db = db

    def find_available(self, day, time_slot, party_size):
        """
        Active tables seating at least ``party_size`` that hold no confirmed
        reservation for the day and slot, by table number.

        The capacity filter is "at least": a four-top is offered to a couple.
        """
        day = normalize_day(day)
        time_slot = validate_time_slot(time_slot)
        party_size = parse_positive_int(party_size, "guests", maximum=None)
        if party_size > MAX_DB_INT:
            # No table column can hold a capacity that large
            return []

        query = text("""
            SELECT t.id, t.table_number, t.capacity, t.is_active, t.created_at
            FROM dining_tables t
            WHERE t.is_active = :active
              AND t.capacity >= :party_size
              AND t.id NOT IN (
                  SELECT r.table_id FROM reservations r
                  WHERE r.date = :day
                    AND r.time_slot = :time_slot
                    AND r.status = :status
              )
            ORDER BY t.table_number
        """).bindparams(
            bindparam("active", type_=Boolean),
            bindparam("day", type_=Date),
        ).columns(
            DiningTable.id,
            DiningTable.table_number,
            DiningTable.capacity,
            DiningTable.is_active,
            DiningTable.created_at,
        )

        statement = select(DiningTable).from_statement(query)
        return self.db.scalars(statement, {
            "active": True,
            "party_size": party_size,
            "day": day,
            "time_slot": time_slot,
            "status": STATUS_CONFIRMED,
        }).all()
