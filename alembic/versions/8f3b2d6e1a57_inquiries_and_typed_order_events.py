"""inquiries, support requests and typed order events

Revision ID: 8f3b2d6e1a57
Revises: 5c1e7a9d2b40
Create Date: 2026-10-18 16:40:02.518930

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8f3b2d6e1a57'
down_revision: Union[str, Sequence[str], None] = '5c1e7a9d2b40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


inquiry_status = sa.Enum("new", "contacted", "closed", name="inquirystatus")
support_status = sa.Enum("open", "in_progress", "resolved", name="supportstatus")
order_event_type = sa.Enum(
    "order_placed", "payment_initialized", "payment_init_failed", "payment_reactivated",
    "payment_success", "payment_failed", "payment_amount_mismatch", "project_created",
    "order_cancelled",
    name="ordereventtype",
)
order_status = sa.Enum("pending", "paid", "cancelled", name="orderstatus", create_type=False)


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    for enum in (inquiry_status, support_status, order_event_type):
        enum.create(bind, checkfirst=True)

    # ------------------------------------------------------------------
    # Inquiries
    # ------------------------------------------------------------------
    op.create_table(
        "quote_request",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("company", sa.String(), nullable=True),
        sa.Column("project_type", sa.String(), nullable=False),
        sa.Column("budget_range", sa.String(), nullable=False),
        sa.Column("timeline", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("features", sa.JSON(), nullable=False),
        sa.Column("preferred_start_date", sa.Date(), nullable=True),
        sa.Column("status", inquiry_status, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_quote_request_user_id", "quote_request", ["user_id"])
    op.create_index("ix_quote_request_email", "quote_request", ["email"])
    op.create_index("ix_quote_request_status", "quote_request", ["status"])

    op.create_table(
        "contact_message",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("subject", sa.String(), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column("status", inquiry_status, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_contact_message_user_id", "contact_message", ["user_id"])
    op.create_index("ix_contact_message_email", "contact_message", ["email"])
    op.create_index("ix_contact_message_status", "contact_message", ["status"])

    op.create_table(
        "support_request",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("project.id"), nullable=True),
        sa.Column("subject", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("status", support_status, nullable=False),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_support_request_user_id", "support_request", ["user_id"])
    op.create_index("ix_support_request_project_id", "support_request", ["project_id"])
    op.create_index("ix_support_request_status", "support_request", ["status"])

    # ------------------------------------------------------------------
    # Typed order timeline
    # ------------------------------------------------------------------
    with op.batch_alter_table("order_event") as batch:
        batch.alter_column(
            "event_type",
            existing_type=sa.String(),
            type_=order_event_type,
            existing_nullable=False,
            postgresql_using="event_type::ordereventtype",
        )
        batch.add_column(sa.Column("order_status", order_status, nullable=True))


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table("order_event") as batch:
        batch.drop_column("order_status")
        batch.alter_column(
            "event_type",
            existing_type=order_event_type,
            type_=sa.String(),
            existing_nullable=False,
        )

    op.drop_index("ix_support_request_status", table_name="support_request")
    op.drop_index("ix_support_request_project_id", table_name="support_request")
    op.drop_index("ix_support_request_user_id", table_name="support_request")
    op.drop_table("support_request")
    op.drop_index("ix_contact_message_status", table_name="contact_message")
    op.drop_index("ix_contact_message_email", table_name="contact_message")
    op.drop_index("ix_contact_message_user_id", table_name="contact_message")
    op.drop_table("contact_message")
    op.drop_index("ix_quote_request_status", table_name="quote_request")
    op.drop_index("ix_quote_request_email", table_name="quote_request")
    op.drop_index("ix_quote_request_user_id", table_name="quote_request")
    op.drop_table("quote_request")

    bind = op.get_bind()
    for enum in (order_event_type, support_status, inquiry_status):
        enum.drop(bind, checkfirst=True)
