from init_db import DEFAULT_TABLES, initialize_database, seed_tables
from models import DiningTable, Role, User


def test_roles_and_admin_seeded(db):
    assert {r.name for r in db.query(Role)} == {"customer", "admin"}
    admin = db.query(User).filter_by(email="admin@test.local").one()
    assert admin.role_name == "admin"
    assert admin.password.startswith("$2")


def test_initialize_is_idempotent(app, db):
    initialize_database(app.extensions["db_engine"], app.config)

    assert db.query(Role).count() == 2
    assert db.query(User).count() == 1


def test_seed_tables_skips_existing_numbers(app, registry, db):
    registry.create(3, 10)

    created = seed_tables()

    assert created == len(DEFAULT_TABLES) - 1
    numbers = [t.table_number for t in db.query(DiningTable).order_by(DiningTable.table_number)]
    assert numbers == list(range(1, 9))
    assert db.query(DiningTable).filter_by(table_number=3).one().capacity == 10
    assert seed_tables() == 0
