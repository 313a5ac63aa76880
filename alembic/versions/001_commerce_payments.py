"""Payment gateways, orders and payments

Revision ID: 001_commerce_payments
Revises:
Create Date: 2026-10-18

Tables:
- payment_gateways (configured gateway instances: plugin, mode, api key)
- orders (checkout context: total, currency, redirect key)
- payments (one row per off-site payment attempt)
"""
from alembic import op
import sqlalchemy as sa

revision = "001_commerce_payments"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── payment_gateways ──
    op.create_table(
        "payment_gateways",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("label", sa.String(255), nullable=False),
        sa.Column("plugin", sa.String(100), nullable=False),
        sa.Column("mode", sa.String(10), nullable=False, server_default="test"),
        sa.Column("api_key", sa.Text(), nullable=False, server_default=""),
        sa.Column("status", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )

    # ── orders ──
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("total_number", sa.Numeric(19, 6), nullable=False, server_default="0"),
        sa.Column("currency_code", sa.String(3), nullable=False, server_default="IRR"),
        sa.Column("payment_gateway_id", sa.String(100), sa.ForeignKey("payment_gateways.id", ondelete="SET NULL")),
        sa.Column("payment_redirect_key", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )

    # ── payments ──
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("payment_gateway_id", sa.String(100), sa.ForeignKey("payment_gateways.id"), nullable=False),
        sa.Column("amount", sa.Numeric(19, 6), nullable=False),
        sa.Column("currency_code", sa.String(3), nullable=False),
        sa.Column("state", sa.String(32), nullable=False, server_default="authorization"),
        sa.Column("remote_id", sa.String(255), index=True),
        sa.Column("remote_state", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index(
        "ix_payments_remote_order_state",
        "payments",
        ["remote_id", "order_id", "state"],
    )


def downgrade() -> None:
    op.drop_index("ix_payments_remote_order_state", table_name="payments")
    op.drop_table("payments")
    op.drop_table("orders")
    op.drop_table("payment_gateways")
