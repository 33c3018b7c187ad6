from configs import db
from werkzeug.security import generate_password_hash
from db.models.user import User, UserRole
from app import create_app

app = create_app()

with app.app_context():
    users = [
        User(
            username="superadmin",
            password_hash=generate_password_hash("1"),
            full_name="Super Admin",
            role=UserRole.SUPER_ADMIN,
            is_active=True,
        ),
        User(
            username="admin",
            password_hash=generate_password_hash("1"),
            full_name="System Admin",
            role=UserRole.ADMIN,
            is_active=True,
        ),
        User(
            username="manager1",
            password_hash=generate_password_hash("1"),
            full_name="Sales Manager",
            role=UserRole.MANAGER,
            is_active=True,
        ),
        User(
            username="staff1",
            password_hash=generate_password_hash("1"),
            full_name="Sales Executive",
            role=UserRole.STAFF,
            is_active=True,
        ),
        User(
            username="staff2",
            password_hash=generate_password_hash("1"),
            full_name="Production Floor",
            role=UserRole.STAFF,
            is_active=True,
        ),
    ]

    for u in users:
        if not User.query.filter_by(username=u.username).first():
            db.session.add(u)
    db.session.commit()

    print("✅ Seeded users with all defined roles")
