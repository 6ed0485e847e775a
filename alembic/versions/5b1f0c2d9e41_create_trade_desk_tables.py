"""create_trade_desk_tables

Revision ID: 5b1f0c2d9e41
Revises:
Create Date: 2026-10-18 09:12:44.180322
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1f0c2d9e41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # CUSTOMERS
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_customers_id", "customers", ["id"], unique=False)
    op.create_index("ix_customers_email", "customers", ["email"], unique=True)

    # PRODUCTS
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        sa.Column("capital_per_kilo", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("capital_per_kilo > 0", name="ck_capital_per_kilo_positive"),
    )
    op.create_index("ix_products_id", "products", ["id"], unique=False)

    # CUSTOMER PRICES
    op.create_table(
        "customer_products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("price_per_kilo", sa.Numeric(10, 2), nullable=False),
        sa.UniqueConstraint("customer_id", "product_id", name="uq_customer_product"),
        sa.CheckConstraint("price_per_kilo > 0", name="ck_price_per_kilo_positive"),
    )
    op.create_index("ix_customer_products_id", "customer_products", ["id"], unique=False)
    op.create_index("ix_customer_products_customer_id", "customer_products", ["customer_id"], unique=False)
    op.create_index("ix_customer_products_product_id", "customer_products", ["product_id"], unique=False)

    # SALES
    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_sales_id", "sales", ["id"], unique=False)
    op.create_index("ix_sales_customer_id", "sales", ["customer_id"], unique=False)
    op.create_index("ix_sales_created_at", "sales", ["created_at"], unique=False)
    op.create_index("ix_sales_customer_created", "sales", ["customer_id", "created_at"], unique=False)

    # SALE LINE ITEMS
    op.create_table(
        "sale_products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sale_id", sa.Integer(), sa.ForeignKey("sales.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("quantity", sa.Numeric(10, 2), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_sale_product_quantity_positive"),
        sa.CheckConstraint("price > 0", name="ck_sale_product_price_positive"),
    )
    op.create_index("ix_sale_products_id", "sale_products", ["id"], unique=False)
    op.create_index("ix_sale_products_sale_id", "sale_products", ["sale_id"], unique=False)
    op.create_index("ix_sale_products_product_id", "sale_products", ["product_id"], unique=False)

    # USERS
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_id", "users", ["id"], unique=False)
    op.create_index("ix_users_email", "users", ["email"], unique=True)


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")

    op.drop_index("ix_sale_products_product_id", table_name="sale_products")
    op.drop_index("ix_sale_products_sale_id", table_name="sale_products")
    op.drop_index("ix_sale_products_id", table_name="sale_products")
    op.drop_table("sale_products")

    op.drop_index("ix_sales_customer_created", table_name="sales")
    op.drop_index("ix_sales_created_at", table_name="sales")
    op.drop_index("ix_sales_customer_id", table_name="sales")
    op.drop_index("ix_sales_id", table_name="sales")
    op.drop_table("sales")

    op.drop_index("ix_customer_products_product_id", table_name="customer_products")
    op.drop_index("ix_customer_products_customer_id", table_name="customer_products")
    op.drop_index("ix_customer_products_id", table_name="customer_products")
    op.drop_table("customer_products")

    op.drop_index("ix_products_id", table_name="products")
    op.drop_table("products")

    op.drop_index("ix_customers_email", table_name="customers")
    op.drop_index("ix_customers_id", table_name="customers")
    op.drop_table("customers")
