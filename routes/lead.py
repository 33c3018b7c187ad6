from flask import Blueprint, request
from flask_login import login_required

from dao import lead as lead_dao
from utils.auth import current_actor
from utils.responses import ok, payload

lead_bp = Blueprint("lead_api", __name__, url_prefix="/api/leads")


def _flag(v):
    if v is None:
        return None
    return v.strip().lower() in ("1", "true", "yes")


@lead_bp.route("", methods=["GET"])
@login_required
def leads_list():
    leads = lead_dao.list_leads(current_actor(), converted=_flag(request.args.get("converted")))
    return ok([lead.to_dict() for lead in leads])


@lead_bp.route("", methods=["POST"])
@login_required
def leads_add():
    lead = lead_dao.create_lead(payload(), current_actor())
    return ok(lead.to_dict(), "Lead created successfully", 201)


@lead_bp.route("/<int:lead_id>", methods=["GET"])
@login_required
def leads_detail(lead_id: int):
    return ok(lead_dao.get_lead(lead_id).to_dict())


@lead_bp.route("/<int:lead_id>", methods=["PUT", "PATCH"])
@login_required
def leads_edit(lead_id: int):
    lead = lead_dao.update_lead(lead_id, payload(), current_actor())
    return ok(lead.to_dict(), "Lead updated successfully")
