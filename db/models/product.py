from datetime import datetime

from configs import db


class Category(db.Model):
    __tablename__ = "category"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(120), unique=True, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)


class Product(db.Model):
    __tablename__ = "product"
    __table_args__ = (
        db.CheckConstraint("stock_quantity >= 0", name="ck_product_stock"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False)

    category_id = db.Column(db.Integer, db.ForeignKey("category.id"), nullable=False)
    category = db.relationship("Category", backref="products")

    description = db.Column(db.Text)
    volume = db.Column(db.String(30))  # "200ml", "500g"
    price = db.Column(db.Numeric(18, 2), nullable=False, default=0)
    stock_quantity = db.Column(db.Numeric(18, 3), nullable=False, default=0)
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
            "category_id": self.category_id,
            "volume": self.volume,
            "price": float(self.price or 0),
            "stock_quantity": float(self.stock_quantity or 0),
            "is_active": self.is_active,
        }
