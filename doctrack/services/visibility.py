from __future__ import annotations

from typing import Iterable

from doctrack.models.directory import UserRole
from doctrack.models.tracking import DocumentStatus
from doctrack.schemas.tracking import ActorSnapshot, DocumentSnapshot

_HIDDEN_FROM_RECIPIENT = frozenset({DocumentStatus.draft, DocumentStatus.sent})


def can_see(document: DocumentSnapshot, actor: ActorSnapshot) -> bool:
    if actor.role == UserRole.super_admin:
        return True
    if document.sender is not None and document.sender.id == actor.id:
        return True
    # Drafts stay private to the sender; a sent document shows up at its
    # destination only once it is received.
    return (
        document.recipient_office == actor.office
        and document.status not in _HIDDEN_FROM_RECIPIENT
    )


def matches_query(document: DocumentSnapshot, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    sender_name = document.sender.name if document.sender is not None else ""
    haystacks = (
        document.title,
        document.description,
        document.tracking_number,
        sender_name,
    )
    return any(needle in (value or "").lower() for value in haystacks)


def visible_documents(
    documents: Iterable[DocumentSnapshot],
    actor: ActorSnapshot | None,
    search_query: str | None = None,
) -> list[DocumentSnapshot]:
    """Documents ``actor`` may see, optionally narrowed by a search query.

    Order follows the input; callers sort.
    """
    if actor is None:
        return []
    visible = [doc for doc in documents if can_see(doc, actor)]
    if search_query and search_query.strip():
        visible = [doc for doc in visible if matches_query(doc, search_query)]
    return visible
