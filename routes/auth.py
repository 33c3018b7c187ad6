from flask import Blueprint
from flask_login import login_user, logout_user, current_user
from werkzeug.security import check_password_hash

from db.models.user import User
from utils.responses import ok, error, payload

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/login", methods=["POST"])
def login():
    data = payload()
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    user = User.query.filter_by(username=username).first()

    if not user or not check_password_hash(user.password_hash, password):
        return error("invalid_credentials", "Invalid username or password", 401)

    if not user.is_active:
        return error("account_disabled", "Account is disabled", 403)

    login_user(user, remember=True)
    return ok(user.to_dict(), "Logged in")


@auth_bp.route("/logout", methods=["POST"])
def logout():
    if current_user.is_authenticated:
        logout_user()
    return ok(None, "Logged out")


@auth_bp.route("/me", methods=["GET"])
def me():
    if not current_user.is_authenticated:
        return error("unauthorized", "Login required", 401)
    return ok(current_user.to_dict())
