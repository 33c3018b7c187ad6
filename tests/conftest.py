"""
Shared fixtures: an app bound to in-memory SQLite, fresh tables per test,
users for each role and a minimal stock/lead setup.
"""
from decimal import Decimal

import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from configs import db
from db.models.lead import Lead
from db.models.material import RawMaterial
from db.models.product import Category, Product
from db.models.user import User, UserRole
from utils.auth import Actor

PASSWORD = "secret"


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "SECRET_KEY": "test",
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _user(username: str, role: UserRole) -> User:
    u = User(
        username=username,
        password_hash=generate_password_hash(PASSWORD),
        full_name=username.title(),
        role=role,
        is_active=True,
    )
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture
def admin_user(app):
    return _user("admin", UserRole.ADMIN)


@pytest.fixture
def manager(app):
    return _user("manager1", UserRole.MANAGER)


@pytest.fixture
def staff(app):
    return _user("staff1", UserRole.STAFF)


@pytest.fixture
def other_staff(app):
    return _user("staff2", UserRole.STAFF)


@pytest.fixture
def manager_actor(manager):
    return Actor.from_user(manager)


@pytest.fixture
def staff_actor(staff):
    return Actor.from_user(staff)


@pytest.fixture
def material(app):
    m = RawMaterial(name="Aloe vera extract", unit="kg", current_quantity=Decimal("10"))
    db.session.add(m)
    db.session.commit()
    return m


@pytest.fixture
def product(app):
    c = Category(name="Skin Care")
    db.session.add(c)
    db.session.flush()
    p = Product(
        name="Aloe Face Gel",
        category_id=c.id,
        price=Decimal("349"),
        stock_quantity=Decimal("5"),
    )
    db.session.add(p)
    db.session.commit()
    return p


@pytest.fixture
def lead(staff):
    lead = Lead(
        full_name="Ravi Kumar",
        phone="9800000001",
        email="ravi@example.com",
        company="Kumar Distributors",
        assigned_to=staff.id,
        created_by=staff.id,
    )
    db.session.add(lead)
    db.session.commit()
    return lead


@pytest.fixture
def login(client):
    def _login(user: User):
        resp = client.post(
            "/auth/login", json={"username": user.username, "password": PASSWORD}
        )
        assert resp.status_code == 200, resp.get_json()
        return client

    return _login
