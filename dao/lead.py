# dao/lead.py
import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from configs import db
from dao import b2b as b2b_dao
from db.models.lead import Lead, LeadRemark
from db.models.user import User
from utils.auth import Actor
from utils.errors import Conflict, Forbidden, NotFound, StorageError, ValidationError

logger = logging.getLogger(__name__)

_CONTACT_FIELDS = ("full_name", "phone", "email", "company", "lead_status")
# NOT NULL columns that callers may edit
_REQUIRED_FIELDS = ("phone", "lead_status")


def _commit(lead: Lead):
    phone, lead_id = lead.phone, lead.id
    try:
        db.session.commit()
    except IntegrityError as ex:
        db.session.rollback()
        if _phone_taken(phone, lead_id):
            raise Conflict("A lead with this phone number already exists", phone=phone) from ex
        logger.exception("lead rejected by the database", extra={"lead_id": lead_id})
        raise StorageError("Lead could not be saved") from ex
    except SQLAlchemyError as ex:
        db.session.rollback()
        raise StorageError("Lead could not be saved") from ex


def _phone_taken(phone: Optional[str], lead_id: Optional[int]) -> bool:
    if not phone:
        return False
    q = Lead.query.filter(Lead.phone == phone)
    if lead_id is not None:
        q = q.filter(Lead.id != lead_id)
    return q.first() is not None


def _required(v, field: str) -> str:
    v = "" if v is None else str(v).strip()
    if not v:
        raise ValidationError(f"{field} cannot be empty", field=field)
    return v


def _opt_id(v) -> Optional[int]:
    if v in (None, ""):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        raise ValidationError("Invalid user id")


def _ensure_user(user_id: Optional[int]) -> None:
    if user_id is not None and User.query.get(user_id) is None:
        raise NotFound("User", user_id)


def _apply_patch(lead: Lead, patch: Dict, actor: Actor) -> None:
    if "assigned_to" in patch:
        assignee = _opt_id(patch["assigned_to"])
        if assignee != lead.assigned_to:
            if not actor.is_manager:
                raise Forbidden("Only managers can reassign leads")
            _ensure_user(assignee)
            lead.assigned_to = assignee
            lead.assigned_date = datetime.utcnow() if assignee is not None else None

    for k in _CONTACT_FIELDS:
        if k in patch:
            v = patch[k]
            if k in _REQUIRED_FIELDS:
                v = _required(v, k)
            setattr(lead, k, v)

    comment = patch.get("remarks")
    if isinstance(comment, str) and comment.strip():
        lead.remarks.append(
            LeadRemark(comment=comment.strip(), by=actor.id, date=datetime.utcnow())
        )

    converted = patch.get("converted")
    if converted is True:
        converted_by = _opt_id(patch.get("converted_by"))
        _ensure_user(converted_by)
        lead.converted = True
        lead.converted_by = converted_by or actor.id
        lead.converted_date = datetime.utcnow()
    elif converted is False:
        lead.converted = False
        lead.converted_by = None
        lead.converted_date = None


def list_leads(actor: Actor, converted: Optional[bool] = None) -> List[Lead]:
    q = Lead.query.filter(Lead.is_active.is_(True))
    if not actor.is_manager:
        q = q.filter(or_(Lead.assigned_to == actor.id, Lead.created_by == actor.id))
    if converted is not None:
        q = q.filter(Lead.converted.is_(converted))
    return q.order_by(Lead.created_at.desc(), Lead.id.desc()).all()


def get_lead(lead_id) -> Lead:
    lead = Lead.query.get(int(lead_id))
    if lead is None or not lead.is_active:
        raise NotFound("Lead", lead_id)
    return lead


def create_lead(fields: Dict, actor: Actor) -> Lead:
    """Staff-created leads are assigned to their creator; managers may assign later."""
    phone = _required(fields.get("phone"), "phone")
    status = _required(fields["lead_status"], "lead_status") if "lead_status" in fields else "NEW"

    lead = Lead(
        full_name=(fields.get("full_name") or "Unknown").strip(),
        phone=phone,
        email=fields.get("email"),
        company=fields.get("company"),
        lead_status=status,
        source=fields.get("source") or "MANUAL",
        created_by=actor.id,
    )
    if actor.is_manager:
        assignee = _opt_id(fields.get("assigned_to"))
        _ensure_user(assignee)
        lead.assigned_to = assignee
    else:
        lead.assigned_to = actor.id
    if lead.assigned_to is not None:
        lead.assigned_date = datetime.utcnow()

    db.session.add(lead)
    _commit(lead)
    return lead


def update_lead(lead_id, patch: Dict, actor: Actor) -> Lead:
    """
    Edit a lead and drive its conversion.

    Only managers or the current assignee may edit; only managers may
    reassign. ``remarks`` appends to the remark log. Once the lead is
    converted, its B2B record is guaranteed to exist (created at most once).
    """
    patch = patch or {}
    lead = get_lead(lead_id)
    if not (actor.is_manager or lead.assigned_to == actor.id):
        raise Forbidden("Not allowed to edit this lead")

    try:
        with db.session.no_autoflush:
            _apply_patch(lead, patch, actor)
    except (Forbidden, NotFound, ValidationError):
        db.session.rollback()
        raise
    _commit(lead)

    if lead.converted:
        b2b_dao.ensure_b2b_for_lead(lead, actor)
    return lead
