from flask import Blueprint
from flask_login import login_required

from dao import manufacturing as mfg_dao
from utils.auth import current_actor
from utils.responses import ok, payload

manufacturing_bp = Blueprint("manufacturing_api", __name__, url_prefix="/api/manufacturing")


@manufacturing_bp.route("", methods=["POST"])
@login_required
def manufacturing_create():
    data = payload()
    log = mfg_dao.record_production(
        product_id=data.get("product_id"),
        material_id=data.get("material_id"),
        quantity_used=data.get("quantity_used"),
        manufactured_qty=data.get("manufactured_qty"),
        actor=current_actor(),
        remarks=data.get("remarks"),
        manufacturing_date=data.get("manufacturing_date"),
    )
    return ok(log.to_dict(), "Manufacturing recorded successfully", 201)


@manufacturing_bp.route("", methods=["GET"])
@login_required
def manufacturing_list():
    logs = mfg_dao.list_logs()
    return ok([log.to_dict() for log in logs])


@manufacturing_bp.route("/product/<int:product_id>", methods=["GET"])
@login_required
def manufacturing_by_product(product_id: int):
    logs = mfg_dao.list_logs(product_id=product_id)
    return ok([log.to_dict() for log in logs])


@manufacturing_bp.route("/<int:log_id>", methods=["GET"])
@login_required
def manufacturing_detail(log_id: int):
    return ok(mfg_dao.get_log(log_id).to_dict())


@manufacturing_bp.route("/<int:log_id>/reverse", methods=["POST"])
@login_required
def manufacturing_reverse(log_id: int):
    data = payload()
    reversal = mfg_dao.reverse_production(log_id, current_actor(), reason=data.get("reason"))
    return ok(reversal.to_dict(), "Stock changes reversed", 201)
