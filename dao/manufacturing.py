# dao/manufacturing.py
"""
Production runs: raw material in, finished goods out.

``record_production`` and ``reverse_production`` are each one unit of work.
Stock rows are locked material-first, then product, and nothing is committed
until the log (or reversal) row is in the session, so a failure at any step
leaves both counters and the log table untouched.
"""
import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from configs import db
from db.models.manufacturing import ManufacturingLog, ManufacturingReversal
from db.models.material import RawMaterial
from db.models.product import Product
from utils.auth import Actor
from utils.errors import (
    Conflict,
    InsufficientStock,
    LedgerError,
    NotFound,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# stock columns are Numeric(18, 3)
_QTY_STEP = Decimal("0.001")
_QTY_LIMIT = Decimal("1e15")


def _d(x) -> Decimal:
    return Decimal(str(x or 0))


def _positive(value, field: str) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required", field=field)
    try:
        qty = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number", field=field)
    if not qty.is_finite():
        raise ValidationError(f"{field} must be a number", field=field)
    if qty >= _QTY_LIMIT:
        raise ValidationError(f"{field} is too large", field=field)
    qty = qty.quantize(_QTY_STEP, rounding=ROUND_HALF_UP)
    if qty <= 0:
        raise ValidationError(f"{field} must be > 0", field=field)
    return qty


def _required_id(value, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} is required", field=field)


def _to_date(v) -> Optional[date]:
    if not v:
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    try:
        return datetime.strptime(str(v).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("manufacturing_date must be YYYY-MM-DD")


def _lock_material(material_id: int) -> Optional[RawMaterial]:
    return RawMaterial.query.filter_by(id=material_id).with_for_update().one_or_none()


def _lock_product(product_id: int) -> Optional[Product]:
    return Product.query.filter_by(id=product_id).with_for_update().one_or_none()


# ---------- public APIs ----------
def record_production(
    product_id,
    material_id,
    quantity_used,
    manufactured_qty,
    actor: Actor,
    remarks: Optional[str] = None,
    manufacturing_date=None,
) -> ManufacturingLog:
    """
    Consume ``quantity_used`` of a raw material and add ``manufactured_qty``
    to a product's stock, logging the run.

    Raises ValidationError, NotFound, InsufficientStock (business failures,
    not retried) or StorageError (rolled back; caller may resubmit).
    """
    product_id = _required_id(product_id, "product_id")
    material_id = _required_id(material_id, "material_id")
    used = _positive(quantity_used, "quantity_used")
    made = _positive(manufactured_qty, "manufactured_qty")
    run_date = _to_date(manufacturing_date)

    try:
        material = _lock_material(material_id)
        if material is None or not material.is_active:
            raise NotFound("Raw material", material_id)
        if _d(material.current_quantity) < used:
            raise InsufficientStock(
                "raw material", material.id, _d(material.current_quantity), used
            )

        product = _lock_product(product_id)
        if product is None or not product.is_active:
            raise NotFound("Product", product_id)

        material.current_quantity = _d(material.current_quantity) - used
        material.updated_by = actor.id

        product.stock_quantity = _d(product.stock_quantity) + made
        product.updated_by = actor.id

        log = ManufacturingLog(
            product_id=product.id,
            material_id=material.id,
            quantity_used=used,
            manufactured_qty=made,
            remarks=(remarks or None),
            created_by=actor.id,
        )
        if run_date:
            log.manufacturing_date = run_date
        db.session.add(log)
        db.session.commit()
    except LedgerError as ex:
        db.session.rollback()
        logger.info(
            "production rejected",
            extra={"material_id": material_id, "product_id": product_id, "code": ex.code},
        )
        raise
    except SQLAlchemyError as ex:
        db.session.rollback()
        logger.exception(
            "production rolled back",
            extra={"material_id": material_id, "product_id": product_id},
        )
        raise StorageError("Manufacturing entry could not be saved") from ex

    logger.info(
        "production recorded",
        extra={
            "log_id": log.id,
            "material_id": material_id,
            "product_id": product_id,
            "quantity_used": str(used),
            "manufactured_qty": str(made),
            "actor_id": actor.id,
        },
    )
    return log


def reverse_production(log_id, actor: Actor, reason: Optional[str] = None) -> ManufacturingReversal:
    """Undo the stock effect of one run. A log can be reversed only once."""
    log_id = _required_id(log_id, "log_id")
    try:
        log = ManufacturingLog.query.get(log_id)
        if log is None:
            raise NotFound("Manufacturing log", log_id)
        if ManufacturingReversal.query.filter_by(log_id=log.id).first() is not None:
            raise Conflict("Manufacturing log already reversed", log_id=log.id)

        material = _lock_material(log.material_id)
        if material is None:
            raise NotFound("Raw material", log.material_id)
        product = _lock_product(log.product_id)
        if product is None:
            raise NotFound("Product", log.product_id)

        made = _d(log.manufactured_qty)
        if _d(product.stock_quantity) < made:
            raise InsufficientStock("product", product.id, _d(product.stock_quantity), made)

        material.current_quantity = _d(material.current_quantity) + _d(log.quantity_used)
        material.updated_by = actor.id
        product.stock_quantity = _d(product.stock_quantity) - made
        product.updated_by = actor.id

        reversal = ManufacturingReversal(
            log_id=log.id, reason=(reason or None), reversed_by=actor.id
        )
        db.session.add(reversal)
        db.session.commit()
    except LedgerError:
        db.session.rollback()
        raise
    except IntegrityError as ex:
        # lost the race against a concurrent reversal of the same log
        db.session.rollback()
        raise Conflict("Manufacturing log already reversed", log_id=log_id) from ex
    except SQLAlchemyError as ex:
        db.session.rollback()
        logger.exception("reversal rolled back", extra={"log_id": log_id})
        raise StorageError("Manufacturing reversal could not be saved") from ex

    logger.info("production reversed", extra={"log_id": log_id, "actor_id": actor.id})
    return reversal


def list_logs(product_id=None, material_id=None) -> List[ManufacturingLog]:
    q = ManufacturingLog.query
    if product_id is not None:
        q = q.filter(ManufacturingLog.product_id == _required_id(product_id, "product_id"))
    if material_id is not None:
        q = q.filter(
            ManufacturingLog.material_id == _required_id(material_id, "material_id")
        )
    return q.order_by(ManufacturingLog.created_at.desc(), ManufacturingLog.id.desc()).all()


def get_log(log_id) -> ManufacturingLog:
    log = ManufacturingLog.query.get(_required_id(log_id, "log_id"))
    if log is None:
        raise NotFound("Manufacturing log", log_id)
    return log
