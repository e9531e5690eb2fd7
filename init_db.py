"""
Database bootstrap: wait for the server, create the schema and seed the
fixed roles plus the admin account. ``--seed-tables`` also loads the
default floor plan.

    python init_db.py [--seed-tables]
"""
import argparse
import logging
import time

from sqlalchemy.exc import IntegrityError, OperationalError

from config.db import Base, SessionLocal, init_engine
from config.settings import Config
from logic.auth import hash_password
from models import DiningTable, Role, User, ROLE_ADMIN, ROLE_IDS

logger = logging.getLogger(__name__)

DEFAULT_TABLES = [
    {"table_number": 1, "capacity": 2},
    {"table_number": 2, "capacity": 2},
    {"table_number": 3, "capacity": 4},
    {"table_number": 4, "capacity": 4},
    {"table_number": 5, "capacity": 6},
    {"table_number": 6, "capacity": 6},
    {"table_number": 7, "capacity": 8},
    {"table_number": 8, "capacity": 8},
]


def wait_for_database(engine, max_attempts=10, delay=3):
    for attempt in range(1, max_attempts + 1):
        try:
            conn = engine.connect()
            conn.close()
            logger.info("Database connection established")
            return True
        except OperationalError:
            logger.warning(
                "Database not ready (attempt %s/%s), retrying in %s seconds...",
                attempt, max_attempts, delay,
            )
            if attempt < max_attempts:
                time.sleep(delay)
    return False


def initialize_database(engine, config):
    """Create every table and seed roles and the admin account. Idempotent."""
    if not wait_for_database(engine, max_attempts=config["DB_CONNECT_ATTEMPTS"]):
        raise RuntimeError("Could not connect to the database")

    Base.metadata.create_all(bind=engine)
    logger.info("Schema created (or already present)")

    db = SessionLocal()
    try:
        for name, role_id in ROLE_IDS.items():
            if db.get(Role, role_id) is None:
                db.add(Role(id=role_id, name=name))
                logger.info("Role '%s' (id %s) created", name, role_id)

        admin_email = config["ADMIN_EMAIL"].strip().lower()
        if not db.query(User).filter_by(email=admin_email).first():
            db.add(User(
                name=config["ADMIN_NAME"],
                email=admin_email,
                password=hash_password(config["ADMIN_PASSWORD"], rounds=config["BCRYPT_ROUNDS"]),
                role_id=ROLE_IDS[ROLE_ADMIN],
            ))
            logger.info("Admin user '%s' created", admin_email)

        db.commit()
    except IntegrityError:
        # Another worker seeded first
        db.rollback()
        logger.info("Seed data already present")
    finally:
        db.close()


def seed_tables(tables=DEFAULT_TABLES):
    """Add the default tables, skipping numbers that already exist."""
    db = SessionLocal()
    try:
        created = 0
        for entry in tables:
            if db.query(DiningTable).filter_by(table_number=entry["table_number"]).first():
                continue
            db.add(DiningTable(is_active=True, **entry))
            created += 1
        db.commit()
        logger.info("%s tables created", created)
        return created
    finally:
        db.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create and seed the reservations database")
    parser.add_argument("--seed-tables", action="store_true", help="load the default floor plan")
    args = parser.parse_args(argv)

    logging.basicConfig(level=Config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = {key: getattr(Config, key) for key in dir(Config) if key.isupper()}

    engine = init_engine(config["DATABASE_URL"])
    initialize_database(engine, config)
    if args.seed_tables:
        seed_tables()


if __name__ == "__main__":
    main()
