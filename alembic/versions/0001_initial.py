"""initial production and conversion ledger schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

userrole = sa.Enum("SUPER_ADMIN", "ADMIN", "MANAGER", "STAFF", name="userrole")
orderstatus = sa.Enum("OPEN", "PARTIAL", "CLOSED", name="orderstatus")


def upgrade() -> None:
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(80), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(120)),
        sa.Column("email", sa.String(255)),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("role", userrole, nullable=False),
    )
    op.create_index("ix_user_account_username", "user_account", ["username"], unique=True)

    op.create_table(
        "category",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )

    op.create_table(
        "raw_material",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("unit", sa.String(30), nullable=False),
        sa.Column("current_quantity", sa.Numeric(18, 3), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("updated_by", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.CheckConstraint("current_quantity >= 0", name="ck_raw_material_qty"),
    )

    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("category.id"), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("volume", sa.String(30)),
        sa.Column("price", sa.Numeric(18, 2), nullable=False),
        sa.Column("stock_quantity", sa.Numeric(18, 3), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("updated_by", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.CheckConstraint("stock_quantity >= 0", name="ck_product_stock"),
    )

    op.create_table(
        "manufacturing_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("product.id"), nullable=False),
        sa.Column(
            "material_id", sa.Integer(), sa.ForeignKey("raw_material.id"), nullable=False
        ),
        sa.Column("quantity_used", sa.Numeric(18, 3), nullable=False),
        sa.Column("manufactured_qty", sa.Numeric(18, 3), nullable=False),
        sa.Column("manufacturing_date", sa.Date()),
        sa.Column("remarks", sa.Text()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.CheckConstraint("quantity_used > 0", name="ck_mlog_quantity_used"),
        sa.CheckConstraint("manufactured_qty > 0", name="ck_mlog_manufactured_qty"),
    )
    op.create_index("ix_manufacturing_log_product_id", "manufacturing_log", ["product_id"])
    op.create_index("ix_manufacturing_log_material_id", "manufacturing_log", ["material_id"])

    op.create_table(
        "manufacturing_reversal",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "log_id",
            sa.Integer(),
            sa.ForeignKey("manufacturing_log.id"),
            nullable=False,
            unique=True,
        ),
        sa.Column("reason", sa.Text()),
        sa.Column("reversed_by", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "lead",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("full_name", sa.String(255)),
        sa.Column("phone", sa.String(30), nullable=False, unique=True),
        sa.Column("email", sa.String(255)),
        sa.Column("company", sa.String(255)),
        sa.Column("lead_status", sa.String(40), nullable=False),
        sa.Column("source", sa.String(40)),
        sa.Column("assigned_to", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("assigned_date", sa.DateTime()),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("converted", sa.Boolean(), nullable=False),
        sa.Column("converted_by", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("converted_date", sa.DateTime()),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )

    op.create_table(
        "lead_remark",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "lead_id", sa.Integer(), sa.ForeignKey("lead.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("by", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("date", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_lead_remark_lead_id", "lead_remark", ["lead_id"])

    op.create_table(
        "b2b",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("lead_id", sa.Integer(), sa.ForeignKey("lead.id"), nullable=False, unique=True),
        sa.Column("sr_no", sa.Integer(), nullable=False, unique=True),
        sa.Column("client_name", sa.String(255)),
        sa.Column("mobile", sa.String(30)),
        sa.Column("email", sa.String(255)),
        sa.Column("company", sa.String(255)),
        sa.Column("order_date", sa.Date()),
        sa.Column("order_details", sa.Text()),
        sa.Column("total_order_value", sa.Numeric(18, 2), nullable=False),
        sa.Column("amount_received", sa.Numeric(18, 2), nullable=False),
        sa.Column("amount_pending", sa.Numeric(18, 2), nullable=False),
        sa.Column("last_receipt_date", sa.Date()),
        sa.Column("order_status", orderstatus, nullable=False),
        sa.Column("converted_by", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("additional_remarks", sa.Text()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
        sa.CheckConstraint("total_order_value >= 0", name="ck_b2b_total"),
        sa.CheckConstraint("amount_received >= 0", name="ck_b2b_received"),
    )


def downgrade() -> None:
    op.drop_table("b2b")
    op.drop_index("ix_lead_remark_lead_id", table_name="lead_remark")
    op.drop_table("lead_remark")
    op.drop_table("lead")
    op.drop_table("manufacturing_reversal")
    op.drop_index("ix_manufacturing_log_material_id", table_name="manufacturing_log")
    op.drop_index("ix_manufacturing_log_product_id", table_name="manufacturing_log")
    op.drop_table("manufacturing_log")
    op.drop_table("product")
    op.drop_table("raw_material")
    op.drop_table("category")
    op.drop_index("ix_user_account_username", table_name="user_account")
    op.drop_table("user_account")
    orderstatus.drop(op.get_bind(), checkfirst=True)
    userrole.drop(op.get_bind(), checkfirst=True)
