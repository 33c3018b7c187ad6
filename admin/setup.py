# admin/setup.py
from flask import abort
from flask_login import current_user, logout_user
from flask_admin import Admin, AdminIndexView, expose
from flask_admin.contrib.sqla import ModelView
from flask_admin.theme import Bootstrap4Theme
from configs import db
from db.models.user import UserRole


def _is_admin():
    return current_user.is_authenticated and current_user.has_role(
        UserRole.SUPER_ADMIN, UserRole.ADMIN
    )


def _deny():
    abort(403 if current_user.is_authenticated else 401)


class MyAdminIndex(AdminIndexView):
    @expose("/")
    def index(self):
        if not _is_admin():
            _deny()
        return super().index()

    @expose("/logout")
    def admin_logout(self):
        if current_user.is_authenticated:
            logout_user()
        return {"data": None, "message": "Logged out"}

    def is_accessible(self):
        return _is_admin()

    def inaccessible_callback(self, name, **kwargs):
        _deny()


class SecureModelView(ModelView):
    can_view_details = True
    can_export = True

    def is_accessible(self):
        return _is_admin()

    def inaccessible_callback(self, name, **kwargs):
        _deny()


class UserView(SecureModelView):
    can_delete = False
    column_exclude_list = ["password_hash"]
    form_excluded_columns = ["password_hash"]


# Stock counters move only through receipts and production runs
class RawMaterialView(SecureModelView):
    can_delete = False
    column_searchable_list = ["name"]
    column_list = ["id", "name", "unit", "current_quantity", "is_active"]
    form_columns = ["name", "unit", "is_active"]


class ProductView(SecureModelView):
    can_delete = False
    column_searchable_list = ["name"]
    column_filters = ["category_id", "is_active"]
    column_list = ["id", "name", "category", "price", "stock_quantity", "is_active"]
    form_columns = ["name", "category", "description", "volume", "price", "is_active"]


class ManufacturingLogView(SecureModelView):
    can_create = False
    can_edit = False
    can_delete = False
    column_filters = ["product_id", "material_id", "created_at"]
    column_list = [
        "id",
        "product",
        "material",
        "quantity_used",
        "manufactured_qty",
        "manufacturing_date",
        "created_by",
    ]


class LeadView(SecureModelView):
    can_delete = False
    column_searchable_list = ["full_name", "phone", "company"]
    column_filters = ["lead_status", "converted", "assigned_to"]
    column_list = ["id", "full_name", "phone", "company", "lead_status", "converted"]
    form_columns = ["full_name", "phone", "email", "company", "lead_status"]


class B2BView(SecureModelView):
    can_create = False
    can_delete = False
    column_searchable_list = ["client_name", "mobile"]
    column_filters = ["order_status", "order_date"]
    column_list = [
        "sr_no",
        "client_name",
        "company",
        "order_date",
        "total_order_value",
        "amount_received",
        "amount_pending",
        "order_status",
    ]
    # amount_pending is recomputed on every flush
    form_columns = [
        "order_date",
        "order_details",
        "total_order_value",
        "amount_received",
        "last_receipt_date",
        "order_status",
        "additional_remarks",
    ]


def init_admin(app):

    admin = Admin(
        app,
        name="Back Office Admin",
        theme=Bootstrap4Theme(),
        index_view=MyAdminIndex(url="/manage"),
        url="/manage",
    )
    # avoid circular imports
    from db.models.user import User
    from db.models.material import RawMaterial
    from db.models.product import Category, Product
    from db.models.manufacturing import ManufacturingLog
    from db.models.lead import Lead
    from db.models.b2b import B2B

    admin.add_view(
        UserView(User, db.session, category="System", endpoint="admin_user", name="Users")
    )
    admin.add_view(
        SecureModelView(
            Category,
            db.session,
            category="Catalog",
            endpoint="admin_category",
            name="Categories",
        )
    )
    admin.add_view(
        ProductView(
            Product, db.session, category="Catalog", endpoint="admin_product", name="Products"
        )
    )
    admin.add_view(
        RawMaterialView(
            RawMaterial,
            db.session,
            category="Production",
            endpoint="admin_material",
            name="Raw Materials",
        )
    )
    admin.add_view(
        ManufacturingLogView(
            ManufacturingLog,
            db.session,
            category="Production",
            endpoint="admin_mlog",
            name="Manufacturing Logs",
        )
    )
    admin.add_view(
        LeadView(Lead, db.session, category="Sales", endpoint="admin_lead", name="Leads")
    )
    admin.add_view(
        B2BView(B2B, db.session, category="Sales", endpoint="admin_b2b", name="B2B Orders")
    )
    return admin
