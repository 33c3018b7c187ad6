from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from configs import db
from db.models.product import Category, Product
from utils.auth import Actor
from utils.errors import Conflict, NotFound, StorageError, ValidationError


def _commit(conflict: Optional[str] = None):
    """``conflict`` names the unique rule the write can race on, if any."""
    try:
        db.session.commit()
    except IntegrityError as ex:
        db.session.rollback()
        if conflict:
            raise Conflict(conflict) from ex
        raise StorageError("Product could not be saved") from ex
    except SQLAlchemyError as ex:
        db.session.rollback()
        raise StorageError("Product could not be saved") from ex


def get_or_create_category(name: str) -> Category:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required")
    c = Category.query.filter_by(name=name).first()
    if c is None:
        c = Category(name=name)
        db.session.add(c)
        _commit("Category already exists")
    return c


def list_products(include_inactive: bool = False) -> List[Product]:
    q = Product.query
    if not include_inactive:
        q = q.filter(Product.is_active.is_(True))
    return q.order_by(Product.name.asc()).all()


def get_product(product_id: int) -> Optional[Product]:
    return Product.query.get(product_id)


def create_product(
    name: str,
    category_id: int,
    price,
    actor: Actor,
    volume: Optional[str] = None,
    description: Optional[str] = None,
) -> Product:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Product name is required")
    try:
        price = Decimal(str(price))
    except (InvalidOperation, ValueError):
        raise ValidationError("price must be a number", field="price")
    if not price.is_finite() or price < 0 or price >= Decimal("1e16"):
        raise ValidationError("price must be >= 0", field="price")
    price = price.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    try:
        category_id = int(category_id)
    except (TypeError, ValueError):
        raise ValidationError("category_id is required", field="category_id")
    if Category.query.get(category_id) is None:
        raise NotFound("Category", category_id)

    p = Product(
        name=name,
        category_id=category_id,
        price=price,
        volume=volume,
        description=description,
        stock_quantity=Decimal("0"),
        created_by=actor.id,
        updated_by=actor.id,
    )
    db.session.add(p)
    _commit()
    return p


def deactivate_product(product_id: int, actor: Actor) -> Product:
    p = Product.query.get(product_id)
    if p is None:
        raise NotFound("Product", product_id)
    p.is_active = False
    p.updated_by = actor.id
    _commit()
    return p
