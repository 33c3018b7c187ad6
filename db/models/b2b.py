import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import event

from configs import db


class OrderStatus(enum.Enum):
    OPEN = "OPEN"
    PARTIAL = "PARTIAL"
    CLOSED = "CLOSED"


class B2B(db.Model):
    """Order/financial tracking for a converted lead (one row per lead)."""

    __tablename__ = "b2b"
    __table_args__ = (
        db.CheckConstraint("total_order_value >= 0", name="ck_b2b_total"),
        db.CheckConstraint("amount_received >= 0", name="ck_b2b_received"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    lead_id = db.Column(db.Integer, db.ForeignKey("lead.id"), unique=True, nullable=False)
    sr_no = db.Column(db.Integer, unique=True, nullable=False)

    client_name = db.Column(db.String(255))
    mobile = db.Column(db.String(30))
    email = db.Column(db.String(255))
    company = db.Column(db.String(255))

    order_date = db.Column(db.Date)
    order_details = db.Column(db.Text)
    total_order_value = db.Column(db.Numeric(18, 2), nullable=False, default=0)
    amount_received = db.Column(db.Numeric(18, 2), nullable=False, default=0)
    amount_pending = db.Column(db.Numeric(18, 2), nullable=False, default=0)
    last_receipt_date = db.Column(db.Date)
    order_status = db.Column(
        db.Enum(OrderStatus, name="orderstatus"), default=OrderStatus.OPEN, nullable=False
    )

    converted_by = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    created_by = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    additional_remarks = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    lead = db.relationship("Lead", backref=db.backref("b2b", uselist=False))

    def to_dict(self):
        return {
            "id": self.id,
            "lead_id": self.lead_id,
            "sr_no": self.sr_no,
            "client_name": self.client_name,
            "mobile": self.mobile,
            "email": self.email,
            "company": self.company,
            "order_date": self.order_date.isoformat() if self.order_date else None,
            "order_details": self.order_details,
            "total_order_value": float(self.total_order_value or 0),
            "amount_received": float(self.amount_received or 0),
            "amount_pending": float(self.amount_pending or 0),
            "last_receipt_date": (
                self.last_receipt_date.isoformat() if self.last_receipt_date else None
            ),
            "order_status": self.order_status.value if self.order_status else None,
            "converted_by": self.converted_by,
            "created_by": self.created_by,
            "additional_remarks": self.additional_remarks,
        }


def _d(x) -> Decimal:
    return Decimal(str(x or 0))


@event.listens_for(B2B, "before_insert")
@event.listens_for(B2B, "before_update")
def _recompute_pending(mapper, connection, target):
    target.amount_pending = _d(target.total_order_value) - _d(target.amount_received)
