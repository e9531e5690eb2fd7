import logging

from flask import Blueprint, Flask, current_app, g, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from config.db import SessionLocal, init_engine
from config.settings import Config
from init_db import initialize_database
from logic.auth import auth_bp
from logic.decorators import admin_required, with_identity
from logic.errors import InvalidInputError, ReservationError
from logic.reservations.availability import AvailabilityEngine
from logic.reservations.booking import BookingService
from logic.reservations.ledger import ReservationLedger
from logic.responses import failure, success
from logic.tables.registry import TableRegistry
from logic.updates import ReservationUpdate, TableUpdate

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")


def _json_body():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return payload


def _booking_service():
    return BookingService(g.db, today=current_app.config["CLOCK"])


def _serialize(reservations, with_user=False):
    return [r.to_dict(with_user=with_user) for r in reservations]


# ============================ customer routes ============================

@api_bp.route("/tables", methods=["GET"])
@with_identity
def list_active_tables(identity):
    tables = TableRegistry(g.db).list_active()
    return success([t.to_dict() for t in tables])


@api_bp.route("/reservations/available", methods=["GET"])
@with_identity
def available_tables(identity):
    day = request.args.get("date")
    time_slot = request.args.get("time_slot")
    guests = request.args.get("guests")

    if not day or not time_slot or not guests:
        raise InvalidInputError("Please provide date, time_slot and guests")

    tables = AvailabilityEngine(g.db).find_available(day, time_slot, guests)
    return success([t.to_dict() for t in tables])


@api_bp.route("/reservations", methods=["POST"])
@with_identity
def create_reservation(identity):
    payload = _json_body()
    logger.debug("Booking request from user %s: %s", identity["user_id"], payload)

    reservation = _booking_service().book(
        user_id=identity["user_id"],
        table_id=payload.get("table_id"),
        day=payload.get("date"),
        time_slot=payload.get("time_slot"),
        party_size=payload.get("number_of_guests"),
    )
    return success(
        reservation.to_dict(with_user=True),
        "Reservation created successfully",
        201,
    )


@api_bp.route("/reservations/mine", methods=["GET"])
@with_identity
def my_reservations(identity):
    reservations = ReservationLedger(g.db).list_for_user(identity["user_id"])
    return success(_serialize(reservations))


@api_bp.route("/reservations/<int:reservation_id>", methods=["DELETE"])
@with_identity
def cancel_reservation(identity, reservation_id):
    reservation = _booking_service().cancel(
        identity["user_id"], identity["role"], reservation_id
    )
    return success(reservation.to_dict(), "Reservation cancelled successfully")


# ============================= admin routes ==============================

@api_bp.route("/admin/reservations", methods=["GET"])
@admin_required
def list_all_reservations(identity):
    reservations = ReservationLedger(g.db).list_all()
    return success(_serialize(reservations, with_user=True))


@api_bp.route("/admin/reservations/date/<day>", methods=["GET"])
@admin_required
def reservations_by_date(identity, day):
    reservations = ReservationLedger(g.db).list_for_date(day)
    return success(_serialize(reservations, with_user=True), date=day)


@api_bp.route("/admin/reservations/<int:reservation_id>", methods=["PUT"])
@admin_required
def edit_reservation(identity, reservation_id):
    update = ReservationUpdate.from_payload(_json_body())
    reservation = ReservationLedger(g.db).admin_update(reservation_id, update)
    return success(reservation.to_dict(with_user=True), "Reservation updated successfully")


@api_bp.route("/admin/reservations/<int:reservation_id>", methods=["DELETE"])
@admin_required
def admin_cancel_reservation(identity, reservation_id):
    reservation = _booking_service().cancel(
        identity["user_id"], identity["role"], reservation_id
    )
    return success(
        reservation.to_dict(with_user=True),
        "Reservation cancelled successfully by admin",
    )


@api_bp.route("/admin/tables", methods=["GET"])
@admin_required
def list_all_tables(identity):
    tables = TableRegistry(g.db).list_all()
    return success([t.to_dict() for t in tables])


@api_bp.route("/admin/tables", methods=["POST"])
@admin_required
def create_table(identity):
    payload = _json_body()
    table = TableRegistry(g.db).create(payload.get("table_number"), payload.get("capacity"))
    return success(table.to_dict(), "Table created successfully", 201)


@api_bp.route("/admin/tables/<int:table_id>", methods=["PUT"])
@admin_required
def update_table(identity, table_id):
    update = TableUpdate.from_payload(_json_body())
    table = TableRegistry(g.db).set_attributes(table_id, update)
    return success(table.to_dict(), "Table updated successfully")


# ================================ wiring =================================

def register_error_handlers(app, jwt):

    @app.errorhandler(ReservationError)
    def handle_reservation_error(e):
        _rollback()
        return failure(e.message, e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        _rollback()
        return failure(e.description, e.code)

    @app.errorhandler(Exception)
    def handle_exception(e):
        # Anything unexpected: roll back the request session and hide the details
        _rollback()
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return failure("Internal server error", 500)

    @jwt.unauthorized_loader
    def missing_token(reason):
        return failure(reason, 401)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return failure(reason, 401)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return failure("Token has expired", 401)


def _rollback():
    db = g.get("db")
    if db is None:
        return
    try:
        db.rollback()
    except Exception:
        logger.exception("Rollback failed")


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)
    jwt = JWTManager(app)

    engine = init_engine(app.config["DATABASE_URL"])
    app.extensions["db_engine"] = engine
    if app.config["RUN_INIT_DB"]:
        initialize_database(engine, app.config)

    @app.before_request
    def open_session():
        g.db = SessionLocal()

    @app.teardown_appcontext
    def close_session(exc):
        db = g.pop("db", None)
        if db is not None:
            db.close()

    app.register_blueprint(auth_bp)
    app.register_blueprint(api_bp)
    register_error_handlers(app, jwt)
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
