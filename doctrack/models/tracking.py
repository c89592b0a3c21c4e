import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from doctrack.db import Base


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class DocumentStatus(enum.Enum):
    draft = "Draft"
    sent = "Sent"
    received = "Received"
    forwarded = "Forwarded"
    # Declared but not produced by any transition.
    for_approval = "For Approval"
    approved = "Approved"
    released = "Released"
    completed = "Completed"
    disapproved = "Disapproved"


class Priority(enum.Enum):
    low = "Low"
    medium = "Medium"
    high = "High"


class DeliveryType(enum.Enum):
    internal = "Internal"
    external = "External"


class HistoryAction(enum.Enum):
    created = "Created"
    sent = "Sent"
    received = "Received"
    forwarded = "Forwarded"
    returned_to_sender = "Returned to Sender"
    approved = "Approved"
    completed = "Completed"
    cancelled = "Cancel"
    released = "Released"
    transaction_finished = "Transaction Finished"


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class Document(Base):
    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("tracking_number", name="uq_documents_tracking_number"),
        Index("ix_documents_sender_id", "sender_id"),
        Index("ix_documents_recipient_office", "recipient_office"),
        Index("ix_documents_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    tracking_number: Mapped[str] = mapped_column(String(40), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(120), nullable=False)
    priority: Mapped[Priority] = mapped_column(Enum(Priority), default=Priority.medium)
    delivery_type: Mapped[DeliveryType] = mapped_column(
        Enum(DeliveryType), default=DeliveryType.internal
    )
    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus), default=DocumentStatus.draft
    )
    # Nulled, not cascaded, when the sender is deleted.
    sender_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL")
    )
    recipient_office: Mapped[str] = mapped_column(String(160), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    # Always the timestamp of the newest history entry; never auto-bumped.
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    sender = relationship("User", back_populates="sent_documents", lazy="joined")
    history = relationship(
        "DocumentHistory",
        back_populates="document",
        order_by="DocumentHistory.sequence.desc()",
        lazy="selectin",
    )


class DocumentHistory(Base):
    """One audit row per transition. Rows are inserted, never updated."""

    __tablename__ = "document_history"
    __table_args__ = (
        UniqueConstraint("document_id", "sequence", name="uq_document_history_seq"),
        Index("ix_document_history_document_id", "document_id"),
        Index("ix_document_history_timestamp", "timestamp"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    document_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("documents.id"), nullable=False
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    action: Mapped[str] = mapped_column(String(80), nullable=False)
    # Actor fields are copied so the trail survives user deletion.
    actor_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    actor_name: Mapped[str] = mapped_column(String(160), nullable=False)
    actor_role: Mapped[str] = mapped_column(String(40), nullable=False)
    office: Mapped[str] = mapped_column(String(160), nullable=False)
    remarks: Mapped[str | None] = mapped_column(Text)

    document = relationship("Document", back_populates="history")


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_id", "user_id"),
        Index("ix_notifications_is_read", "is_read"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    document_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("documents.id")
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    user = relationship("User", foreign_keys=[user_id])
