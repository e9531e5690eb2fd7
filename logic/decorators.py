from functools import wraps

from flask_jwt_extended import get_jwt, get_jwt_identity, jwt_required

from logic.errors import ForbiddenError
from models.user_model import ROLE_ADMIN


def current_identity():
    return {
        "user_id": int(get_jwt_identity()),
        "role": get_jwt().get("role"),
    }


def with_identity(func):
    """Pass the caller's ``{"user_id", "role"}`` to the view as ``identity``."""
    @wraps(func)
    @jwt_required()
    def wrapper(*args, **kwargs):
        return func(*args, identity=current_identity(), **kwargs)
    return wrapper


def admin_required(func):
    @wraps(func)
    @jwt_required()
    def wrapper(*args, **kwargs):
        identity = current_identity()
        if identity["role"] != ROLE_ADMIN:
            raise ForbiddenError("Access denied: administrators only")
        return func(*args, identity=identity, **kwargs)
    return wrapper
