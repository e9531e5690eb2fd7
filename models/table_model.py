from datetime import datetime

from sqlalchemy import Column, Integer, Boolean, DateTime, CheckConstraint

from config.db import Base


class DiningTable(Base):
    __tablename__ = "dining_tables"
    __table_args__ = (
        CheckConstraint("table_number > 0", name="ck_dining_tables_number_positive"),
        CheckConstraint("capacity > 0", name="ck_dining_tables_capacity_positive"),
    )

    id = Column(Integer, primary_key=True)
    # Unique across active and deactivated tables alike
    table_number = Column(Integer, nullable=False, unique=True)
    capacity = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def to_summary(self):
        return {
            "id": self.id,
            "table_number": self.table_number,
            "capacity": self.capacity,
        }

    def to_dict(self):
        return {
            "id": self.id,
            "table_number": self.table_number,
            "capacity": self.capacity,
            "is_active": self.is_active,
        }
