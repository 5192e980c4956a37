"""Add sub-categories, product sub-category links and personalized orders"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20251019_02"
down_revision = "20251019_01"
branch_labels = None
depends_on = None

NOT_DELETED = sa.text("is_deleted = false")


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "sub_categories",
        *_timestamps(),
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("product_type_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["product_type_id"], ["product_types.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sub_categories_id"), "sub_categories", ["id"], unique=False)
    op.create_index(op.f("ix_sub_categories_product_type_id"), "sub_categories", ["product_type_id"], unique=False)
    op.create_index(
        "uq_sub_categories_type_name_active",
        "sub_categories",
        ["product_type_id", "name"],
        unique=True,
        postgresql_where=NOT_DELETED,
        sqlite_where=NOT_DELETED,
    )

    with op.batch_alter_table("products") as batch:
        batch.add_column(sa.Column("sub_category_id", sa.Integer(), nullable=True))
        batch.create_foreign_key(
            "fk_products_sub_category_id", "sub_categories", ["sub_category_id"], ["id"], ondelete="SET NULL"
        )
        batch.create_index(op.f("ix_products_sub_category_id"), ["sub_category_id"], unique=False)

    op.create_table(
        "personalized_orders",
        *_timestamps(),
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("custom_message", sa.Text(), nullable=False),
        sa.Column("selected_colors", sa.JSON(), nullable=True),
        sa.Column("product_type", sa.String(length=100), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("order_status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("delivery_status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("customer_email", sa.String(length=120), nullable=False),
        sa.Column("customer_phone", sa.String(length=20), nullable=True),
        sa.Column("customer_name", sa.String(length=200), nullable=True),
        sa.Column("delivery_address", sa.Text(), nullable=True),
        sa.Column("payment_status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("payment_reference", sa.String(length=100), nullable=True),
        sa.Column("reference", sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("reference"),
    )
    op.create_index(op.f("ix_personalized_orders_id"), "personalized_orders", ["id"], unique=False)


def downgrade() -> None:
    op.drop_table("personalized_orders")
    with op.batch_alter_table("products") as batch:
        batch.drop_index(op.f("ix_products_sub_category_id"))
        batch.drop_constraint("fk_products_sub_category_id", type_="foreignkey")
        batch.drop_column("sub_category_id")
    op.drop_table("sub_categories")
