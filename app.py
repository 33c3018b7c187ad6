from flask import Flask

from configs import Config, configure_logging, db, login
from db.models.user import User, UserRole
from blueprint import blue_print
from admin.setup import init_admin
from utils.responses import error


@login.user_loader
def load_user(user_id):
    return User.query.get(int(user_id))


@login.unauthorized_handler
def unauthorized():
    return error("unauthorized", "Login required", 401)


def create_app(overrides: dict | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    if not app.config.get("TESTING"):
        configure_logging(app.config.get("LOG_LEVEL"))

    db.init_app(app)
    login.init_app(app)

    @app.context_processor
    def inject_enums():
        return dict(UserRole=UserRole)

    init_admin(app)  # /manage
    blue_print(app)  # /auth, /api/...
    return app


if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=5000)
