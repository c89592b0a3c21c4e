"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "offices",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_offices_name"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("position", sa.String(length=160), nullable=True),
        sa.Column("office", sa.String(length=160), nullable=False),
        sa.Column(
            "role",
            sa.Enum("staff", "approver", "admin", "super_admin", name="userrole"),
            nullable=True,
        ),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_office", "users", ["office"])

    op.create_table(
        "documents",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("tracking_number", sa.String(length=40), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=False),
        sa.Column(
            "priority", sa.Enum("low", "medium", "high", name="priority"), nullable=True
        ),
        sa.Column(
            "delivery_type",
            sa.Enum("internal", "external", name="deliverytype"),
            nullable=True,
        ),
        sa.Column(
            "status",
            sa.Enum(
                "draft",
                "sent",
                "received",
                "forwarded",
                "for_approval",
                "approved",
                "released",
                "completed",
                "disapproved",
                name="documentstatus",
            ),
            nullable=True,
        ),
        sa.Column("sender_id", sa.UUID(), nullable=True),
        sa.Column("recipient_office", sa.String(length=160), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tracking_number", name="uq_documents_tracking_number"),
    )
    op.create_index("ix_documents_sender_id", "documents", ["sender_id"])
    op.create_index("ix_documents_recipient_office", "documents", ["recipient_office"])
    op.create_index("ix_documents_status", "documents", ["status"])

    op.create_table(
        "document_history",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("document_id", sa.UUID(), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("action", sa.String(length=80), nullable=False),
        sa.Column("actor_id", sa.UUID(), nullable=True),
        sa.Column("actor_name", sa.String(length=160), nullable=False),
        sa.Column("actor_role", sa.String(length=40), nullable=False),
        sa.Column("office", sa.String(length=160), nullable=False),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["document_id"], ["documents.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "document_id", "sequence", name="uq_document_history_seq"
        ),
    )
    op.create_index(
        "ix_document_history_document_id", "document_history", ["document_id"]
    )
    op.create_index("ix_document_history_timestamp", "document_history", ["timestamp"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("document_id", sa.UUID(), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=True),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["document_id"], ["documents.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_is_read", "notifications", ["is_read"])


def downgrade() -> None:
    op.drop_index("ix_notifications_is_read", table_name="notifications")
    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_document_history_timestamp", table_name="document_history")
    op.drop_index("ix_document_history_document_id", table_name="document_history")
    op.drop_table("document_history")
    op.drop_index("ix_documents_status", table_name="documents")
    op.drop_index("ix_documents_recipient_office", table_name="documents")
    op.drop_index("ix_documents_sender_id", table_name="documents")
    op.drop_table("documents")
    op.drop_index("ix_users_office", table_name="users")
    op.drop_table("users")
    op.drop_table("offices")

    for enum_name in ["documentstatus", "deliverytype", "priority", "userrole"]:
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
