import logging

import bcrypt
from flask import Blueprint, current_app, g, request
from flask_jwt_extended import create_access_token

from logic.decorators import with_identity
from logic.errors import AuthenticationError, ConflictError, InvalidInputError
from logic.responses import success
from models.user_model import ROLE_CUSTOMER, ROLE_IDS, User

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

MIN_PASSWORD_LENGTH = 6


def hash_password(password, rounds=None):
    rounds = rounds or current_app.config["BCRYPT_ROUNDS"]
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(password, hashed):
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def issue_token(user):
    return create_access_token(
        identity=str(user.id),
        additional_claims={"role": user.role_name},
    )


def _session_payload(user):
    data = user.to_dict()
    data["token"] = issue_token(user)
    return data


@auth_bp.route("/register", methods=["POST"])
def register():
    """Self-service sign-up; always creates a customer account."""
    payload = request.get_json(silent=True) or {}
    name = (payload.get("name") or "").strip()
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password") or ""

    if not name or not email or not password:
        raise InvalidInputError("Please provide name, email and password")
    if "@" not in email:
        raise InvalidInputError("Please provide a valid email")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInputError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    db = g.db
    if db.query(User).filter_by(email=email).first():
        raise ConflictError("Email is already registered")

    user = User(
        name=name,
        email=email,
        password=hash_password(password),
        role_id=ROLE_IDS[ROLE_CUSTOMER],
    )
    db.add(user)
    db.commit()

    logger.info("User registered: %s", email)
    return success(_session_payload(user), "User registered successfully", 201)


@auth_bp.route("/login", methods=["POST"])
def login():
    payload = request.get_json(silent=True) or {}
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password") or ""

    if not email or not password:
        raise InvalidInputError("Please provide email and password")

    user = g.db.query(User).filter_by(email=email).first()
    if user is None or not check_password(password, user.password):
        logger.info("Failed login for %s", email)
        raise AuthenticationError()

    logger.info("Login succeeded for %s", email)
    return success(_session_payload(user), "Login successful")


@auth_bp.route("/me", methods=["GET"])
@with_identity
def me(identity):
    user = g.db.get(User, identity["user_id"])
    if user is None:
        raise AuthenticationError("Session is no longer valid. User not found.")
    return success(user.to_dict())
