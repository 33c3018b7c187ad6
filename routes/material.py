from flask import Blueprint, request
from flask_login import login_required

from dao import material as material_dao
from db.models.user import UserRole
from utils.auth import current_actor, roles_required
from utils.errors import NotFound
from utils.responses import ok, payload

material_bp = Blueprint("material_api", __name__, url_prefix="/api/materials")

_MANAGERS = (UserRole.SUPER_ADMIN, UserRole.ADMIN, UserRole.MANAGER)


@material_bp.route("", methods=["GET"])
@login_required
def materials_list():
    include_inactive = request.args.get("all") in ("1", "true")
    materials = material_dao.list_materials(include_inactive=include_inactive)
    return ok([m.to_dict() for m in materials])


@material_bp.route("", methods=["POST"])
@roles_required(*_MANAGERS)
def materials_add():
    data = payload()
    m = material_dao.create_material(
        name=data.get("name", ""), unit=data.get("unit", ""), actor=current_actor()
    )
    return ok(m.to_dict(), "Raw material created", 201)


@material_bp.route("/<int:material_id>", methods=["GET"])
@login_required
def materials_detail(material_id: int):
    m = material_dao.get_material(material_id)
    if m is None:
        raise NotFound("Raw material", material_id)
    return ok(m.to_dict())


@material_bp.route("/<int:material_id>", methods=["PUT"])
@roles_required(*_MANAGERS)
def materials_edit(material_id: int):
    data = payload()
    fields = {k: data[k] for k in ("name", "unit", "is_active") if k in data}
    m = material_dao.update_material(material_id, current_actor(), **fields)
    return ok(m.to_dict(), "Raw material updated")


@material_bp.route("/<int:material_id>/receive", methods=["POST"])
@roles_required(*_MANAGERS)
def materials_receive(material_id: int):
    data = payload()
    m = material_dao.receive_material(material_id, data.get("quantity"), current_actor())
    return ok(m.to_dict(), "Stock received")


@material_bp.route("/<int:material_id>", methods=["DELETE"])
@roles_required(*_MANAGERS)
def materials_delete(material_id: int):
    material_dao.deactivate_material(material_id, current_actor())
    return ok(None, "Raw material deactivated")
