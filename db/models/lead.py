from datetime import datetime

from configs import db


class Lead(db.Model):
    __tablename__ = "lead"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    full_name = db.Column(db.String(255), default="Unknown")
    phone = db.Column(db.String(30), unique=True, nullable=False)
    email = db.Column(db.String(255))
    company = db.Column(db.String(255))

    lead_status = db.Column(db.String(40), default="NEW", nullable=False)
    source = db.Column(db.String(40), default="MANUAL")  # MANUAL / SHEET / ADS

    assigned_to = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    assigned_date = db.Column(db.DateTime)
    created_by = db.Column(db.Integer, db.ForeignKey("user_account.id"))

    converted = db.Column(db.Boolean, default=False, nullable=False)
    converted_by = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    converted_date = db.Column(db.DateTime)

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    assignee = db.relationship("User", foreign_keys=[assigned_to])
    remarks = db.relationship(
        "LeadRemark",
        backref=db.backref("lead"),
        cascade="all, delete-orphan",
        order_by="LeadRemark.id",
        lazy="selectin",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "full_name": self.full_name,
            "phone": self.phone,
            "email": self.email,
            "company": self.company,
            "lead_status": self.lead_status,
            "source": self.source,
            "assigned_to": self.assigned_to,
            "created_by": self.created_by,
            "converted": self.converted,
            "converted_by": self.converted_by,
            "converted_date": self.converted_date.isoformat() if self.converted_date else None,
            "remarks": [r.to_dict() for r in self.remarks],
        }


class LeadRemark(db.Model):
    __tablename__ = "lead_remark"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    lead_id = db.Column(
        db.Integer, db.ForeignKey("lead.id", ondelete="CASCADE"), nullable=False, index=True
    )
    comment = db.Column(db.Text, nullable=False)
    by = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "comment": self.comment,
            "by": self.by,
            "date": self.date.isoformat() if self.date else None,
        }
