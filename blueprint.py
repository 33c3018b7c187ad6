import logging

from werkzeug.exceptions import HTTPException

from routes.auth import auth_bp
from routes.material import material_bp
from routes.product import product_bp
from routes.manufacturing import manufacturing_bp
from routes.lead import lead_bp
from routes.b2b import b2b_bp
from utils.errors import LedgerError
from utils.responses import error

logger = logging.getLogger(__name__)


def _ledger_error(ex: LedgerError):
    if ex.http_status >= 500:
        logger.error("request failed: %s", ex.message, exc_info=ex)
    return error(ex.code, ex.message, ex.http_status, ex.details or None)


def _http_error(ex: HTTPException):
    if ex.code is None or ex.code < 400:  # routing redirects
        return ex
    code = (ex.name or "error").lower().replace(" ", "_")
    return error(code, ex.description or ex.name, ex.code or 500)


def blue_print(app):
    app.register_blueprint(auth_bp)
    app.register_blueprint(material_bp)
    app.register_blueprint(product_bp)
    app.register_blueprint(manufacturing_bp)
    app.register_blueprint(lead_bp)
    app.register_blueprint(b2b_bp)

    app.register_error_handler(LedgerError, _ledger_error)
    app.register_error_handler(HTTPException, _http_error)
