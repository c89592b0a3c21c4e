from __future__ import annotations

import logging
import random
from datetime import date, datetime, timezone
from typing import List

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from doctrack.config import settings
from doctrack.metrics import DOCUMENT_TRANSITIONS
from doctrack.models.directory import User
from doctrack.models.tracking import (
    Document,
    DocumentHistory,
    DocumentStatus,
    HistoryAction,
)
from doctrack.schemas.tracking import (
    ActionRequest,
    ActorSnapshot,
    AvailableActionsRead,
    DocumentCreate,
    DocumentRead,
    DocumentSnapshot,
    DocumentSummaryRead,
    DocumentUpdate,
    HistoryEntrySnapshot,
    TransactionLogRead,
)
from doctrack.services import lifecycle
from doctrack.services.classifier import classify_or_default
from doctrack.services.common import coerce_uuid, paginate_list
from doctrack.services.event import EventType, publish_event
from doctrack.services.notification import Notifications
from doctrack.services.notification_policy import notifications_for
from doctrack.services.offices import Offices
from doctrack.services.response import ListResponseMixin
from doctrack.services.users import Users
from doctrack.services.visibility import can_see, visible_documents

logger = logging.getLogger(__name__)

TRACKING_NUMBER_ATTEMPTS = 50
RECENT_DOCUMENTS = 5


def _actor(user: User | None) -> ActorSnapshot | None:
    if user is None:
        return None
    return ActorSnapshot.model_validate(user)


def _snapshot(document: Document) -> DocumentSnapshot:
    return DocumentSnapshot.model_validate(document)


def _ensure_office(db: Session, name: str) -> str:
    name = (name or "").strip()
    if not name or not Offices.exists(db, name):
        raise HTTPException(status_code=400, detail=f"Unknown office: {name}")
    return name


def _new_tracking_number(db: Session, now: datetime) -> str:
    prefix = f"{settings.tracking_number_prefix}-{now:%Y-%m}"
    for _ in range(TRACKING_NUMBER_ATTEMPTS):
        candidate = f"{prefix}-{random.randint(100, 999)}"
        taken = db.scalars(
            select(Document.id).where(Document.tracking_number == candidate)
        ).first()
        if taken is None:
            return candidate
    raise HTTPException(
        status_code=503, detail="Could not allocate a free tracking number"
    )


def _history_row(
    document_id, sequence: int, entry: HistoryEntrySnapshot
) -> DocumentHistory:
    return DocumentHistory(
        id=entry.id,
        document_id=document_id,
        sequence=sequence,
        timestamp=entry.timestamp,
        action=entry.action,
        actor_id=entry.actor_id,
        actor_name=entry.actor_name,
        actor_role=entry.actor_role,
        office=entry.office,
        remarks=entry.remarks,
    )


def _next_sequence(db: Session, document_id) -> int:
    current = db.scalar(
        select(func.max(DocumentHistory.sequence)).where(
            DocumentHistory.document_id == document_id
        )
    )
    return (current or 0) + 1


def _notify(
    db: Session,
    updated: DocumentSnapshot,
    previous_status: DocumentStatus,
    actor: ActorSnapshot,
) -> list:
    # The transition is already committed; losing its notifications must
    # not undo it.
    try:
        drafts = notifications_for(updated, previous_status, actor, Users.snapshots(db))
        return Notifications.create_many(db, drafts)
    except SQLAlchemyError:
        logger.exception(
            "Failed to store notifications for document %s", updated.id
        )
        db.rollback()
        return []


def _commit_transition(
    db: Session,
    document: Document,
    before: DocumentSnapshot,
    after: DocumentSnapshot,
    actor: ActorSnapshot,
    action: lifecycle.DocumentAction,
) -> Document:
    entry = after.history[0]
    document.status = after.status
    document.recipient_office = after.recipient_office
    document.updated_at = after.updated_at
    db.add(_history_row(document.id, _next_sequence(db, document.id), entry))
    db.commit()
    DOCUMENT_TRANSITIONS.labels(action=action.value).inc()
    logger.info(
        "Document %s: %s by %s (%s -> %s)",
        after.tracking_number,
        action.value,
        actor.id,
        before.status.value,
        after.status.value,
    )

    stored = _notify(db, after, before.status, actor)
    publish_event(
        EventType.document_transitioned,
        entity_type="document",
        entity_id=after.id,
        actor_id=actor.id,
        document_id=after.id,
        payload={
            "action": action.value,
            "from_status": before.status.value,
            "to_status": after.status.value,
            "notifications": [
                {"id": str(n.id), "user_id": str(n.user_id), "message": n.message}
                for n in stored
            ],
        },
    )
    db.refresh(document)
    return document


def _not_permitted(action: lifecycle.DocumentAction, status: DocumentStatus):
    return HTTPException(
        status_code=403,
        detail={
            "code": "action_not_permitted",
            "message": f"Action {action.value} is not available on a "
            f"{status.value} document",
            "details": {"action": action.value, "status": status.value},
        },
    )


def _invalid_target(message: str):
    return HTTPException(
        status_code=400, detail={"code": "invalid_target", "message": message}
    )


def _utc_date(value: datetime) -> date:
    # SQLite hands back naive values; they are stored as UTC.
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(timezone.utc).date()


def _visible(
    db: Session, actor: User | None, q: str | None = None
) -> tuple[dict, list[DocumentSnapshot]]:
    """Visible snapshots, most recently updated first, plus their ORM rows."""
    if actor is None:
        return {}, []
    rows = {doc.id: doc for doc in db.scalars(select(Document)).unique().all()}
    visible = visible_documents(
        [_snapshot(doc) for doc in rows.values()], _actor(actor), q
    )
    visible.sort(key=lambda snap: snap.updated_at, reverse=True)
    return rows, visible


class Documents(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: DocumentCreate, actor: User) -> Document:
        recipient_office = _ensure_office(db, payload.recipient_office)
        now = datetime.now(timezone.utc)
        suggestion = None
        if payload.category is None or payload.priority is None:
            suggestion = classify_or_default(payload.description)

        document = Document(
            tracking_number=_new_tracking_number(db, now),
            title=payload.title.strip(),
            description=payload.description,
            category=payload.category or suggestion.category,
            priority=payload.priority or suggestion.priority,
            delivery_type=payload.delivery_type,
            status=DocumentStatus.draft,
            sender_id=actor.id,
            recipient_office=recipient_office,
            created_at=now,
            updated_at=now,
        )
        db.add(document)
        db.flush()
        entry = lifecycle.make_history_entry(
            _actor(actor), HistoryAction.created, now
        )
        db.add(_history_row(document.id, 1, entry))
        db.commit()
        db.refresh(document)
        logger.info(
            "Created document %s (%s) for %s",
            document.tracking_number,
            document.id,
            recipient_office,
        )
        publish_event(
            EventType.document_created,
            entity_type="document",
            entity_id=document.id,
            actor_id=actor.id,
            document_id=document.id,
        )
        return document

    @staticmethod
    def get(db: Session, document_id: str) -> Document:
        document = db.get(Document, coerce_uuid(document_id))
        if not document:
            raise HTTPException(status_code=404, detail="Document not found")
        return document

    @staticmethod
    def get_for(db: Session, document_id: str, actor: User | None) -> Document:
        """Fetch a document for ``actor``.

        Opening a document needs visibility or a pending action on it, so an
        office can still open a Sent document to receive it.
        """
        document = Documents.get(db, document_id)
        actor_snapshot = _actor(actor)
        if actor_snapshot is not None:
            snapshot = _snapshot(document)
            if can_see(snapshot, actor_snapshot) or lifecycle.available_actions(
                snapshot, actor_snapshot, settings.hub_office_name
            ):
                return document
        raise HTTPException(status_code=404, detail="Document not found")

    @staticmethod
    def summary(
        db: Session, actor: User | None, today: date | None = None
    ) -> DocumentSummaryRead:
        rows, visible = _visible(db, actor)
        today = today or datetime.now(timezone.utc).date()

        def count(status: DocumentStatus) -> int:
            return sum(1 for snap in visible if snap.status == status)

        drafts = sum(
            1
            for snap in visible
            if snap.status == DocumentStatus.draft
            and snap.sender is not None
            and snap.sender.id == actor.id
        )
        completed_today = sum(
            1
            for snap in visible
            if snap.status == DocumentStatus.completed
            and _utc_date(snap.updated_at) == today
        )
        return DocumentSummaryRead(
            for_approval=count(DocumentStatus.for_approval),
            received=count(DocumentStatus.received),
            completed_today=completed_today,
            drafts=drafts,
            recent=[
                DocumentRead.model_validate(rows[snap.id])
                for snap in visible[:RECENT_DOCUMENTS]
            ],
        )

    @staticmethod
    def list(
        db: Session,
        actor: User | None,
        q: str | None,
        limit: int,
        offset: int,
    ) -> List[Document]:
        """Documents visible to ``actor``, most recently updated first."""
        rows, visible = _visible(db, actor, q)
        return [rows[snap.id] for snap in paginate_list(visible, limit, offset)]

    @staticmethod
    def update_draft(
        db: Session, document_id: str, payload: DocumentUpdate, actor: User
    ) -> Document:
        document = Documents.get(db, document_id)
        if document.sender_id != actor.id:
            raise HTTPException(
                status_code=403, detail="Only the sender can edit this document"
            )
        if document.status != DocumentStatus.draft:
            raise HTTPException(
                status_code=409, detail="Only draft documents can be edited"
            )
        data = payload.model_dump(exclude_unset=True)
        if data.get("recipient_office") is not None:
            data["recipient_office"] = _ensure_office(db, data["recipient_office"])
        for key, value in data.items():
            if value is None:
                continue
            setattr(document, key, value)
        db.commit()
        db.refresh(document)
        logger.info("Edited draft %s", document.tracking_number)
        publish_event(
            EventType.document_updated,
            entity_type="document",
            entity_id=document.id,
            actor_id=actor.id,
            document_id=document.id,
        )
        return document

    @staticmethod
    def actions(
        db: Session, document_id: str, actor: User | None
    ) -> AvailableActionsRead:
        document = Documents.get(db, document_id)
        snapshot = _snapshot(document)
        actor_snapshot = _actor(actor)
        offered = lifecycle.ordered(
            lifecycle.available_actions(
                snapshot, actor_snapshot, settings.hub_office_name
            )
        )
        targets: list[str] = []
        if lifecycle.DocumentAction.forward in offered:
            targets = lifecycle.forward_targets(Offices.names(db), actor_snapshot)
        return AvailableActionsRead(
            document_id=document.id,
            status=document.status,
            actions=[action.value for action in offered],
            forward_targets=targets,
        )

    @staticmethod
    def apply_action(
        db: Session, document_id: str, payload: ActionRequest, actor: User
    ) -> Document:
        document = Documents.get(db, document_id)
        try:
            action = lifecycle.DocumentAction(payload.action)
        except ValueError:
            raise HTTPException(
                status_code=400, detail=f"Unknown action: {payload.action}"
            )
        before = _snapshot(document)
        actor_snapshot = _actor(actor)
        hub_office = settings.hub_office_name
        if action not in lifecycle.available_actions(
            before, actor_snapshot, hub_office
        ):
            raise _not_permitted(action, before.status)

        target = None
        if action == lifecycle.DocumentAction.forward:
            target = (payload.target_office or "").strip()
            if target not in lifecycle.forward_targets(
                Offices.names(db), actor_snapshot
            ):
                raise _invalid_target(f"Cannot forward to office: {target or '-'}")

        try:
            after = lifecycle.transition(
                before,
                actor_snapshot,
                action,
                hub_office,
                target_office=target,
                remarks=payload.remarks,
            )
        except lifecycle.InvalidTarget as e:
            raise _invalid_target(str(e))
        return _commit_transition(db, document, before, after, actor_snapshot, action)

    @staticmethod
    def track(
        db: Session, tracking_number: str, actor: User | None
    ) -> tuple[str, Document]:
        """Look a document up by tracking number.

        A Sent document scanned at its destination office is received on the
        spot; the outcome is then ``received``, otherwise ``found``.
        """
        value = (tracking_number or "").strip()
        document = db.scalars(
            select(Document).where(Document.tracking_number == value)
        ).first()
        if not document:
            raise HTTPException(
                status_code=404, detail=f"No document with tracking number {value}"
            )
        actor_snapshot = _actor(actor)
        if (
            actor_snapshot is not None
            and document.status == DocumentStatus.sent
            and document.recipient_office == actor_snapshot.office
        ):
            before = _snapshot(document)
            after = lifecycle.receive_via_tracking(
                before, actor_snapshot, settings.hub_office_name
            )
            document = _commit_transition(
                db,
                document,
                before,
                after,
                actor_snapshot,
                lifecycle.DocumentAction.receive,
            )
            return "received", document
        return "found", document

    @staticmethod
    def transaction_logs(
        db: Session, limit: int, offset: int
    ) -> List[TransactionLogRead]:
        stmt = (
            select(DocumentHistory, Document.tracking_number, Document.title)
            .join(Document, Document.id == DocumentHistory.document_id)
            .order_by(DocumentHistory.timestamp.desc(), DocumentHistory.sequence.desc())
            .limit(limit)
            .offset(offset)
        )
        return [
            TransactionLogRead(
                id=entry.id,
                document_id=entry.document_id,
                tracking_number=tracking_number,
                document_title=title,
                timestamp=entry.timestamp,
                action=entry.action,
                actor_name=entry.actor_name,
                office=entry.office,
                remarks=entry.remarks,
            )
            for entry, tracking_number, title in db.execute(stmt).all()
        ]


documents = Documents()
