# dao/b2b.py
import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from configs import db
from db.models.b2b import B2B, OrderStatus
from db.models.lead import Lead
from utils.auth import Actor
from utils.errors import Conflict, Forbidden, NotFound, StorageError, ValidationError

logger = logging.getLogger(__name__)

_SR_NO_ATTEMPTS = 3
_CENT = Decimal("0.01")
_MONEY_LIMIT = Decimal("1e16")  # Numeric(18, 2)


# ---------- parsing helpers ----------
def _d(x) -> Decimal:
    return Decimal(str(x or 0))


def _money(v, field: str) -> Decimal:
    if v is None or isinstance(v, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    try:
        amount = Decimal(str(v).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number", field=field)
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{field} must be >= 0", field=field)
    if amount >= _MONEY_LIMIT:
        raise ValidationError(f"{field} is too large", field=field)
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def _to_date(v, field: str = "date") -> Optional[date]:
    if not v:
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    try:
        return datetime.strptime(str(v).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field} must be YYYY-MM-DD", field=field)


def _to_status(v) -> OrderStatus:
    if isinstance(v, OrderStatus):
        return v
    try:
        return OrderStatus((v or "").strip().upper())
    except ValueError:
        raise ValidationError(
            "order_status must be one of OPEN, PARTIAL, CLOSED", field="order_status"
        )


def _text(v, field: str) -> Optional[str]:
    return str(v) if v is not None else None


# Caller-writable fields. amount_pending, sr_no and lead_id are never taken
# from input.
_WRITABLE = {
    "order_date": _to_date,
    "order_details": _text,
    "total_order_value": _money,
    "amount_received": _money,
    "last_receipt_date": _to_date,
    "order_status": lambda v, field: _to_status(v),
    "additional_remarks": _text,
}


def _clean(fields: Optional[Dict]) -> Dict:
    out = {}
    for k, parse in _WRITABLE.items():
        if fields and k in fields:
            out[k] = parse(fields[k], k)
    return out


def _can_edit(actor: Actor, lead: Optional[Lead]) -> bool:
    return actor.is_manager or (lead is not None and lead.assigned_to == actor.id)


def _next_sr_no() -> int:
    last = db.session.query(func.max(B2B.sr_no)).scalar()
    return (last or 0) + 1


def _find_by_lead(lead_id: int) -> Optional[B2B]:
    return B2B.query.filter_by(lead_id=lead_id).one_or_none()


# ---------- insert path (direct create and lead conversion) ----------
def _insert(lead: Lead, values: Dict, actor: Actor) -> B2B:
    """
    Insert the B2B row for ``lead``. The unique index on ``lead_id`` decides
    duplicates: a violation becomes Conflict. An ``sr_no`` collision with a
    concurrent insert is retried with a fresh number.
    """
    lead_id = lead.id
    seed = {
        "client_name": lead.full_name,
        "mobile": lead.phone,
        "email": lead.email,
        "company": lead.company,
        "converted_by": lead.converted_by or actor.id,
        "created_by": actor.id,
    }
    for _ in range(_SR_NO_ATTEMPTS):
        record = B2B(
            lead_id=lead_id,
            sr_no=_next_sr_no(),
            order_status=OrderStatus.OPEN,
            total_order_value=Decimal("0"),
            amount_received=Decimal("0"),
            **seed,
        )
        for k, v in values.items():
            setattr(record, k, v)
        db.session.add(record)
        try:
            db.session.commit()
            return record
        except IntegrityError as ex:
            db.session.rollback()
            if _find_by_lead(lead_id) is not None:
                raise Conflict("B2B record already exists for this lead", lead_id=lead_id) from ex
            logger.warning("b2b sr_no collision, retrying", extra={"lead_id": lead_id})
        except SQLAlchemyError as ex:
            db.session.rollback()
            raise StorageError("B2B record could not be saved") from ex
    raise StorageError("Could not allocate a B2B serial number")


def ensure_b2b_for_lead(lead: Lead, actor: Actor) -> B2B:
    """Create the lead's B2B row if it has none; an existing row is returned."""
    lead_id = lead.id
    try:
        record = _insert(lead, {}, actor)
    except Conflict:
        logger.debug("b2b already exists for converted lead", extra={"lead_id": lead_id})
        return _find_by_lead(lead_id)
    logger.info(
        "b2b created on conversion",
        extra={"lead_id": lead_id, "b2b_id": record.id, "sr_no": record.sr_no},
    )
    return record


# ---------- public APIs ----------
def get_b2b(b2b_id) -> B2B:
    record = B2B.query.get(int(b2b_id))
    if record is None:
        raise NotFound("B2B record", b2b_id)
    return record


def create_b2b(lead_id, fields: Optional[Dict], actor: Actor) -> B2B:
    if not lead_id:
        raise ValidationError("lead_id is required", field="lead_id")
    try:
        lead_id = int(lead_id)
    except (TypeError, ValueError):
        raise ValidationError("lead_id is required", field="lead_id")

    lead = Lead.query.get(lead_id)
    if lead is None or not lead.is_active:
        raise NotFound("Lead", lead_id)
    if not _can_edit(actor, lead):
        raise Forbidden("Not allowed to create B2B for this lead")
    if not lead.converted:
        raise ValidationError("Lead is not converted", lead_id=lead_id)

    record = _insert(lead, _clean(fields), actor)
    logger.info("b2b created", extra={"lead_id": lead_id, "b2b_id": record.id})
    return record


def update_b2b(b2b_id, patch: Optional[Dict], actor: Actor) -> B2B:
    """
    Apply order-progress edits. ``amount_pending`` is recomputed on flush from
    the stored value of whichever money field the patch leaves out.
    """
    record = get_b2b(b2b_id)
    if not _can_edit(actor, record.lead):
        raise Forbidden("Not allowed to edit this B2B")

    for k, v in _clean(patch).items():
        setattr(record, k, v)
    try:
        db.session.commit()
    except SQLAlchemyError as ex:
        db.session.rollback()
        raise StorageError("B2B record could not be saved") from ex
    return record


def list_b2b(
    actor: Actor,
    lead_id=None,
    order_status=None,
    search: Optional[str] = None,
    date_from=None,
    date_to=None,
) -> List[B2B]:
    q = B2B.query
    if not actor.is_manager:
        q = q.filter(B2B.converted_by == actor.id)
    if lead_id:
        q = q.filter(B2B.lead_id == int(lead_id))
    if order_status:
        q = q.filter(B2B.order_status == _to_status(order_status))
    if search and search.strip():
        like = f"%{search.strip()}%"
        q = q.filter(or_(B2B.client_name.ilike(like), B2B.mobile.ilike(like)))
    if date_from:
        q = q.filter(B2B.order_date >= _to_date(date_from, "date_from"))
    if date_to:
        q = q.filter(B2B.order_date <= _to_date(date_to, "date_to"))
    return q.order_by(B2B.created_at.desc(), B2B.id.desc()).all()
