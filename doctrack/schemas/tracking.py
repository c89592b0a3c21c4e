from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from doctrack.models.directory import UserRole
from doctrack.models.tracking import DeliveryType, DocumentStatus, Priority
from doctrack.schemas.directory import UserBrief


# ---------------------------------------------------------------------------
# Snapshots consumed by the lifecycle engine and the policies
# ---------------------------------------------------------------------------


class ActorSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    name: str
    office: str
    role: UserRole


class HistoryEntrySnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    timestamp: datetime
    action: str
    actor_id: UUID | None = None
    actor_name: str
    actor_role: str
    office: str
    remarks: str | None = None


class DocumentSnapshot(BaseModel):
    """Immutable view of a document.

    ``history`` is ordered newest first; ``history[0]`` is the latest entry
    and its timestamp equals ``updated_at``.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    tracking_number: str
    title: str
    description: str
    category: str
    priority: Priority
    delivery_type: DeliveryType
    status: DocumentStatus
    sender: ActorSnapshot | None = None
    recipient_office: str
    created_at: datetime
    updated_at: datetime
    history: tuple[HistoryEntrySnapshot, ...] = ()

    @property
    def last_entry(self) -> HistoryEntrySnapshot | None:
        return self.history[0] if self.history else None


class NotificationDraft(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: UUID
    document_id: UUID | None = None
    message: str


# ---------------------------------------------------------------------------
# Document API payloads
# ---------------------------------------------------------------------------


class DocumentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: str = Field(min_length=1)
    recipient_office: str = Field(min_length=1, max_length=160)
    delivery_type: DeliveryType = DeliveryType.internal
    # Left empty, these are filled in by the classifier or the defaults.
    category: str | None = Field(default=None, max_length=120)
    priority: Priority | None = None


class DocumentUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, min_length=1)
    recipient_office: str | None = Field(default=None, min_length=1, max_length=160)
    delivery_type: DeliveryType | None = None
    category: str | None = Field(default=None, max_length=120)
    priority: Priority | None = None


class HistoryEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    timestamp: datetime
    action: str
    actor_id: UUID | None = None
    actor_name: str
    actor_role: str
    office: str
    remarks: str | None = None


class DocumentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tracking_number: str
    title: str
    description: str
    category: str
    priority: Priority
    delivery_type: DeliveryType
    status: DocumentStatus
    sender: UserBrief | None = None
    recipient_office: str
    created_at: datetime
    updated_at: datetime
    history: list[HistoryEntryRead] = []


class ActionRequest(BaseModel):
    action: str
    target_office: str | None = None
    remarks: str | None = Field(default=None, max_length=2000)


class AvailableActionsRead(BaseModel):
    document_id: UUID
    status: DocumentStatus
    actions: list[str]
    forward_targets: list[str]


class TrackRequest(BaseModel):
    tracking_number: str = Field(min_length=1, max_length=40)


class TrackResult(BaseModel):
    outcome: str
    document: DocumentRead


class DocumentSummaryRead(BaseModel):
    for_approval: int
    received: int
    completed_today: int
    drafts: int
    recent: list[DocumentRead]


class ClassifyRequest(BaseModel):
    description: str


class ClassificationRead(BaseModel):
    category: str
    priority: Priority
    classified: bool


class TransactionLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    document_id: UUID
    tracking_number: str
    document_title: str
    timestamp: datetime
    action: str
    actor_name: str
    office: str
    remarks: str | None = None
