from flask import Blueprint
from flask_login import login_required

from dao import product as product_dao
from db.models.user import UserRole
from utils.auth import current_actor, roles_required
from utils.responses import ok, payload

product_bp = Blueprint("product_api", __name__, url_prefix="/api/products")


@product_bp.route("", methods=["GET"])
@login_required
def products_list():
    return ok([p.to_dict() for p in product_dao.list_products()])


@product_bp.route("", methods=["POST"])
@roles_required(UserRole.SUPER_ADMIN, UserRole.ADMIN, UserRole.MANAGER)
def products_add():
    data = payload()
    category_id = data.get("category_id")
    if not category_id and data.get("category"):
        category_id = product_dao.get_or_create_category(data["category"]).id
    p = product_dao.create_product(
        name=data.get("name", ""),
        category_id=category_id,
        price=data.get("price", 0),
        actor=current_actor(),
        volume=data.get("volume"),
        description=data.get("description"),
    )
    return ok(p.to_dict(), "Product created", 201)


@product_bp.route("/<int:product_id>", methods=["DELETE"])
@roles_required(UserRole.SUPER_ADMIN, UserRole.ADMIN, UserRole.MANAGER)
def products_delete(product_id: int):
    product_dao.deactivate_product(product_id, current_actor())
    return ok(None, "Product deactivated")
