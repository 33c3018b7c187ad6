import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from configs import db
from db.models.material import RawMaterial
from utils.auth import Actor
from utils.errors import Conflict, NotFound, StorageError, ValidationError

logger = logging.getLogger(__name__)

# current_quantity is not here: stock moves only through receipts and production
_EDITABLE = ("name", "unit", "is_active")


def _commit():
    try:
        db.session.commit()
    except IntegrityError as ex:
        db.session.rollback()
        raise Conflict("Raw material already exists") from ex
    except SQLAlchemyError as ex:
        db.session.rollback()
        raise StorageError("Raw material could not be saved") from ex


def list_materials(include_inactive: bool = False) -> List[RawMaterial]:
    q = RawMaterial.query
    if not include_inactive:
        q = q.filter(RawMaterial.is_active.is_(True))
    return q.order_by(RawMaterial.name.asc()).all()


def get_material(material_id: int) -> Optional[RawMaterial]:
    return RawMaterial.query.get(material_id)


def create_material(name: str, unit: str, actor: Actor) -> RawMaterial:
    name = (name or "").strip()
    unit = (unit or "").strip()
    if not name or not unit:
        raise ValidationError("Material name and unit are required")
    m = RawMaterial(
        name=name,
        unit=unit,
        current_quantity=Decimal("0"),
        created_by=actor.id,
        updated_by=actor.id,
    )
    db.session.add(m)
    _commit()
    return m


def update_material(material_id: int, actor: Actor, **fields) -> RawMaterial:
    m = RawMaterial.query.get(material_id)
    if m is None:
        raise NotFound("Raw material", material_id)
    for k in _EDITABLE:
        if k not in fields:
            continue
        v = fields[k]
        if k in ("name", "unit"):
            v = (v or "").strip()
            if not v:
                raise ValidationError(f"{k} cannot be empty", field=k)
        setattr(m, k, v)
    m.updated_by = actor.id
    _commit()
    return m


def deactivate_material(material_id: int, actor: Actor) -> RawMaterial:
    return update_material(material_id, actor, is_active=False)


def receive_material(material_id: int, quantity, actor: Actor) -> RawMaterial:
    """Vendor receipt: add purchased quantity to on-hand stock."""
    try:
        qty = Decimal(str(quantity))
    except (InvalidOperation, ValueError):
        raise ValidationError("quantity must be a number", field="quantity")
    if not qty.is_finite() or qty >= Decimal("1e15"):
        raise ValidationError("quantity must be a number", field="quantity")
    qty = qty.quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    if qty <= 0:
        raise ValidationError("quantity must be > 0", field="quantity")

    m = RawMaterial.query.filter_by(id=material_id).with_for_update().one_or_none()
    if m is None or not m.is_active:
        db.session.rollback()
        raise NotFound("Raw material", material_id)
    m.current_quantity = Decimal(str(m.current_quantity or 0)) + qty
    m.updated_by = actor.id
    _commit()
    logger.info(
        "material received",
        extra={"material_id": m.id, "quantity": str(qty), "actor_id": actor.id},
    )
    return m
