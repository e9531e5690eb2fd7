from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, Index, text
from sqlalchemy.orm import relationship

from config.db import Base

# Slot-list order is the sort order, not the lexical one
TIME_SLOTS = (
    "11:00 AM",
    "12:00 PM",
    "1:00 PM",
    "2:00 PM",
    "6:00 PM",
    "7:00 PM",
    "8:00 PM",
    "9:00 PM",
    "10:00 PM",
)

STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"
STATUSES = (STATUS_CONFIRMED, STATUS_CANCELLED)

_CONFIRMED_ONLY = text("status = 'confirmed'")


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        # At most one confirmed reservation per table, day and slot
        Index(
            "uq_reservations_confirmed_slot",
            "table_id", "date", "time_slot",
            unique=True,
            postgresql_where=_CONFIRMED_ONLY,
            sqlite_where=_CONFIRMED_ONLY,
        ),
        Index("ix_reservations_user_date", "user_id", "date"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    table_id = Column(Integer, ForeignKey("dining_tables.id"), nullable=False)

    # Calendar day only; time of day is never stored
    date = Column(Date, nullable=False)
    time_slot = Column(String(10), nullable=False)
    number_of_guests = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=STATUS_CONFIRMED)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    user = relationship("User")
    table = relationship("DiningTable")

    def to_dict(self, with_user=False, with_table=True):
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "table_id": self.table_id,
            "date": self.date.isoformat(),
            "time_slot": self.time_slot,
            "number_of_guests": self.number_of_guests,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if with_table and self.table is not None:
            data["table"] = self.table.to_summary()
        if with_user and self.user is not None:
            data["user"] = self.user.to_summary()
        return data
