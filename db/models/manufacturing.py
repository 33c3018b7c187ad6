from datetime import datetime

from sqlalchemy import event
from sqlalchemy.orm import object_session

from configs import db
from utils.errors import ImmutableRecord


class ManufacturingLog(db.Model):
    """One production run: raw material consumed, finished goods produced."""

    __tablename__ = "manufacturing_log"
    __table_args__ = (
        db.CheckConstraint("quantity_used > 0", name="ck_mlog_quantity_used"),
        db.CheckConstraint("manufactured_qty > 0", name="ck_mlog_manufactured_qty"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id"), nullable=False, index=True)
    material_id = db.Column(
        db.Integer, db.ForeignKey("raw_material.id"), nullable=False, index=True
    )
    quantity_used = db.Column(db.Numeric(18, 3), nullable=False)
    manufactured_qty = db.Column(db.Numeric(18, 3), nullable=False)
    manufacturing_date = db.Column(db.Date, default=lambda: datetime.utcnow().date())
    remarks = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    created_by = db.Column(db.Integer, db.ForeignKey("user_account.id"))

    product = db.relationship("Product")
    material = db.relationship("RawMaterial")
    reversal = db.relationship("ManufacturingReversal", back_populates="log", uselist=False)

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product.name if self.product else None,
            "material_id": self.material_id,
            "material_name": self.material.name if self.material else None,
            "unit": self.material.unit if self.material else None,
            "quantity_used": float(self.quantity_used),
            "manufactured_qty": float(self.manufactured_qty),
            "manufacturing_date": (
                self.manufacturing_date.isoformat() if self.manufacturing_date else None
            ),
            "remarks": self.remarks,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "created_by": self.created_by,
            "reversed": self.reversal is not None,
        }


class ManufacturingReversal(db.Model):
    __tablename__ = "manufacturing_reversal"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    log_id = db.Column(
        db.Integer, db.ForeignKey("manufacturing_log.id"), unique=True, nullable=False
    )
    reason = db.Column(db.Text)
    reversed_by = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    log = db.relationship("ManufacturingLog", back_populates="reversal")

    def to_dict(self):
        return {
            "id": self.id,
            "log_id": self.log_id,
            "reason": self.reason,
            "reversed_by": self.reversed_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@event.listens_for(ManufacturingLog, "before_update")
def _reject_log_update(mapper, connection, target):
    # backref bookkeeping (log.reversal) marks the row dirty without column changes
    session = object_session(target)
    if session is not None and not session.is_modified(target, include_collections=False):
        return
    raise ImmutableRecord("Manufacturing logs are append-only", id=target.id)


@event.listens_for(ManufacturingLog, "before_delete")
def _reject_log_delete(mapper, connection, target):
    raise ImmutableRecord("Manufacturing logs are append-only", id=target.id)
