"""initial storefront schema

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2026-10-18 10:12:44.184203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e7a9d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


order_status = sa.Enum("pending", "paid", "cancelled", name="orderstatus")
payment_status = sa.Enum("pending", "succeeded", "failed", name="paymentstatus")
project_status = sa.Enum("active", "paused", "completed", name="projectstatus")
recipient_role = sa.Enum("admin", "client", name="recipientrole")
notification_channel = sa.Enum("email", "system", name="notificationchannel")
notification_status = sa.Enum("sent", "failed", name="notificationstatus")


def upgrade() -> None:
    """Upgrade schema."""

    # ------------------------------------------------------------------
    # Users and catalog
    # ------------------------------------------------------------------
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("can_login", sa.Boolean(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("company_name", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "service",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("original_price", sa.Integer(), nullable=True),
        sa.Column("duration", sa.String(), nullable=False),
        sa.Column("spots_remaining", sa.Integer(), nullable=False),
        sa.Column("total_spots", sa.Integer(), nullable=False),
        sa.Column("add_ons", sa.JSON(), nullable=False),
        sa.Column("features", sa.JSON(), nullable=False),
        sa.Column("industry", sa.JSON(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("recommended", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_service_category", "service", ["category"])
    op.create_index("ix_service_is_active", "service", ["is_active"])

    # ------------------------------------------------------------------
    # Checkout sessions
    # ------------------------------------------------------------------
    op.create_table(
        "checkout_session",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("token", sa.String(), nullable=False),
        sa.Column("service_id", sa.String(), sa.ForeignKey("service.id"), nullable=False),
        sa.Column("service_data", sa.JSON(), nullable=False),
        sa.Column("selected_add_ons", sa.JSON(), nullable=False),
        sa.Column("installment", sa.Boolean(), nullable=False),
        sa.Column("total_price", sa.Integer(), nullable=False),
        sa.Column("contact_data", sa.JSON(), nullable=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=False),
        sa.Column("order_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_checkout_session_token", "checkout_session", ["token"], unique=True)
    op.create_index("ix_checkout_session_expires_at", "checkout_session", ["expires_at"])

    # ------------------------------------------------------------------
    # Orders, payments, projects
    # ------------------------------------------------------------------
    op.create_table(
        "order",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("service_id", sa.String(), sa.ForeignKey("service.id"), nullable=True),
        sa.Column("service_name", sa.String(), nullable=False),
        sa.Column("selected_add_ons", sa.JSON(), nullable=False),
        sa.Column("installment", sa.Boolean(), nullable=False),
        sa.Column("total_price", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(), nullable=False),
        sa.Column("status", order_status, nullable=False),
        sa.Column("custom_request", sa.String(), nullable=True),
        sa.Column("timeline", sa.String(), nullable=True),
        sa.Column("contact", sa.JSON(), nullable=True),
        sa.Column("checkout_token", sa.String(), nullable=True),
        sa.Column("payment_reference", sa.String(), nullable=True),
        sa.Column("payment_url", sa.String(), nullable=True),
        sa.Column("payment_link_expires_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("processed_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_order_user_id", "order", ["user_id"])
    op.create_index("ix_order_status", "order", ["status"])
    op.create_index("ix_order_checkout_token", "order", ["checkout_token"])
    op.create_index("ix_order_payment_reference", "order", ["payment_reference"])

    op.create_table(
        "payment",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("order.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("reference", sa.String(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(), nullable=False),
        sa.Column("status", payment_status, nullable=False),
        sa.Column("provider", sa.String(), nullable=False),
        sa.Column("gateway_response", sa.JSON(), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_payment_order_id", "payment", ["order_id"], unique=True)
    op.create_index("ix_payment_user_id", "payment", ["user_id"])
    op.create_index("ix_payment_reference", "payment", ["reference"])

    op.create_table(
        "project",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("order.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("project_name", sa.String(), nullable=False),
        sa.Column("current_stage", sa.String(), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("start_date", sa.DateTime(), nullable=True),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("progress_percentage", sa.Integer(), nullable=False),
        sa.Column("status", project_status, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_project_order_id", "project", ["order_id"], unique=True)
    op.create_index("ix_project_user_id", "project", ["user_id"])
    op.create_index("ix_project_status", "project", ["status"])

    # ------------------------------------------------------------------
    # Audit trail and notifications
    # ------------------------------------------------------------------
    op.create_table(
        "order_event",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("order.id"), nullable=False),
        sa.Column("event_type", sa.String(), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.Column("meta", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("created_by", sa.String(), nullable=False),
    )
    op.create_index("ix_order_event_order_id", "order_event", ["order_id"])
    op.create_index("ix_order_event_event_type", "order_event", ["event_type"])

    op.create_table(
        "notification",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("recipient_role", recipient_role, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("trigger_source", sa.String(), nullable=False),
        sa.Column("related_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("content", sa.String(), nullable=False),
        sa.Column("channel", notification_channel, nullable=False),
        sa.Column("status", notification_status, nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("notification")
    op.drop_index("ix_order_event_event_type", table_name="order_event")
    op.drop_index("ix_order_event_order_id", table_name="order_event")
    op.drop_table("order_event")
    op.drop_index("ix_project_status", table_name="project")
    op.drop_index("ix_project_user_id", table_name="project")
    op.drop_index("ix_project_order_id", table_name="project")
    op.drop_table("project")
    op.drop_index("ix_payment_reference", table_name="payment")
    op.drop_index("ix_payment_user_id", table_name="payment")
    op.drop_index("ix_payment_order_id", table_name="payment")
    op.drop_table("payment")
    op.drop_index("ix_order_payment_reference", table_name="order")
    op.drop_index("ix_order_checkout_token", table_name="order")
    op.drop_index("ix_order_status", table_name="order")
    op.drop_index("ix_order_user_id", table_name="order")
    op.drop_table("order")
    op.drop_index("ix_checkout_session_expires_at", table_name="checkout_session")
    op.drop_index("ix_checkout_session_token", table_name="checkout_session")
    op.drop_table("checkout_session")
    op.drop_index("ix_service_is_active", table_name="service")
    op.drop_index("ix_service_category", table_name="service")
    op.drop_table("service")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")

    bind = op.get_bind()
    for enum in (
        notification_status, notification_channel, recipient_role,
        project_status, payment_status, order_status,
    ):
        enum.drop(bind, checkfirst=True)
