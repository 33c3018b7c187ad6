from datetime import datetime

from configs import db


class RawMaterial(db.Model):
    __tablename__ = "raw_material"
    __table_args__ = (
        db.CheckConstraint("current_quantity >= 0", name="ck_raw_material_qty"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), unique=True, nullable=False)
    unit = db.Column(db.String(30), nullable=False)  # kg, g, ml, litre, piece
    current_quantity = db.Column(db.Numeric(18, 3), nullable=False, default=0)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_by = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    updated_by = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    version = db.Column(db.Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "unit": self.unit,
            "current_quantity": float(self.current_quantity or 0),
            "is_active": self.is_active,
        }
