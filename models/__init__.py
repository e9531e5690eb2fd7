# Importing the models registers every table on Base.metadata
from models.user_model import Role, User, ROLE_ADMIN, ROLE_CUSTOMER, ROLE_IDS
from models.table_model import DiningTable
from models.reservation_model import (
    Reservation,
    TIME_SLOTS,
    STATUSES,
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
)
