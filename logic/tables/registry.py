import logging

from sqlalchemy.exc import IntegrityError

from logic.errors import DuplicateTableError, InvalidInputError, NotFoundError
from logic.schedule import MAX_DB_INT, parse_positive_int
from models.table_model import DiningTable

logger = logging.getLogger(__name__)


class TableRegistry:
    """Admin-managed dining tables. Tables are deactivated, never deleted."""

    def __init__(self, db):
        self.db = db

    def list_active(self):
        return (
            self.db.query(DiningTable)
            .filter(DiningTable.is_active.is_(True))
            .order_by(DiningTable.table_number)
            .all()
        )

    def list_all(self):
        return self.db.query(DiningTable).order_by(DiningTable.table_number).all()

    def get(self, table_id):
        table = self.db.get(DiningTable, table_id) if table_id <= MAX_DB_INT else None
        if table is None:
            raise NotFoundError("Table not found")
        return table

    def create(self, table_number, capacity):
        if table_number is None or capacity is None:
            raise InvalidInputError("Please provide table_number and capacity")
        table_number = parse_positive_int(table_number, "table_number")
        capacity = parse_positive_int(capacity, "capacity")

        existing = self.db.query(DiningTable).filter_by(table_number=table_number).first()
        if existing:
            raise DuplicateTableError()

        table = DiningTable(table_number=table_number, capacity=capacity, is_active=True)
        self.db.add(table)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against another create with the same number
            self.db.rollback()
            raise DuplicateTableError()

        logger.info("Table %s created (capacity %s)", table.table_number, table.capacity)
        return table

    def set_attributes(self, table_id, update):
        table = self.get(table_id)
        if update.is_empty():
            raise InvalidInputError("No valid fields were provided to update")

        if update.capacity is not None:
            table.capacity = update.capacity
        if update.is_active is not None:
            table.is_active = update.is_active

        self.db.commit()
        logger.info(
            "Table %s updated: capacity=%s active=%s",
            table.table_number, table.capacity, table.is_active,
        )
        return table
