from flask import Blueprint, request
from flask_login import login_required

from dao import b2b as b2b_dao
from utils.auth import current_actor
from utils.responses import ok, payload

b2b_bp = Blueprint("b2b_api", __name__, url_prefix="/api/b2b")


@b2b_bp.route("", methods=["GET"])
@login_required
def b2b_list():
    args = request.args
    records = b2b_dao.list_b2b(
        current_actor(),
        lead_id=args.get("lead_id", type=int),
        order_status=args.get("order_status"),
        search=args.get("search"),
        date_from=args.get("date_from"),
        date_to=args.get("date_to"),
    )
    return ok([r.to_dict() for r in records])


@b2b_bp.route("", methods=["POST"])
@login_required
def b2b_add():
    data = payload()
    record = b2b_dao.create_b2b(data.get("lead_id"), data, current_actor())
    return ok(record.to_dict(), "B2B created", 201)


@b2b_bp.route("/<int:b2b_id>", methods=["GET"])
@login_required
def b2b_detail(b2b_id: int):
    return ok(b2b_dao.get_b2b(b2b_id).to_dict())


@b2b_bp.route("/<int:b2b_id>", methods=["PUT", "PATCH"])
@login_required
def b2b_edit(b2b_id: int):
    record = b2b_dao.update_b2b(b2b_id, payload(), current_actor())
    return ok(record.to_dict(), "B2B updated")
