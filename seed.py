# seed.py: categories, products and raw materials with opening stock
from decimal import Decimal

from configs import db
from db.models.material import RawMaterial
from db.models.product import Category, Product
from app import create_app

app = create_app()


# -------- Categories --------
def seed_categories():
    for name in ("Skin Care", "Hair Care", "Body Care"):
        if not Category.query.filter_by(name=name).first():
            db.session.add(Category(name=name))
    db.session.commit()
    print("✓ Categories seeded")


def get_category_id(name: str) -> int:
    c = Category.query.filter_by(name=name).first()
    if not c:
        raise RuntimeError(f"Category '{name}' missing. Run seed_categories() first.")
    return c.id


# -------- Raw materials --------
def seed_materials():
    materials = [
        # name, unit, opening quantity
        ("Aloe vera extract", "litre", "120"),
        ("Coconut oil", "litre", "80"),
        ("Shea butter", "kg", "45"),
        ("Glass bottle 200ml", "piece", "2000"),
        ("Fragrance blend A", "ml", "5000"),
    ]
    for name, unit, qty in materials:
        m = RawMaterial.query.filter_by(name=name).first()
        if not m:
            db.session.add(
                RawMaterial(name=name, unit=unit, current_quantity=Decimal(qty))
            )
        else:
            m.unit = unit
    db.session.commit()
    print("✓ Raw materials seeded/updated")


# -------- Products --------
def seed_products():
    products = [
        # name, category, volume, price
        ("Aloe Face Gel", "Skin Care", "200ml", "349"),
        ("Coconut Hair Oil", "Hair Care", "200ml", "249"),
        ("Shea Body Butter", "Body Care", "100g", "399"),
    ]
    for name, category, volume, price in products:
        if Product.query.filter_by(name=name).first():
            continue
        db.session.add(
            Product(
                name=name,
                category_id=get_category_id(category),
                volume=volume,
                price=Decimal(price),
                stock_quantity=Decimal("0"),
            )
        )
    db.session.commit()
    print("✓ Products seeded")


if __name__ == "__main__":
    with app.app_context():
        seed_categories()
        seed_materials()
        seed_products()
