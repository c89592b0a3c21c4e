from __future__ import annotations

from typing import Iterable

from doctrack.models.tracking import DocumentStatus
from doctrack.schemas.tracking import (
    ActorSnapshot,
    DocumentSnapshot,
    NotificationDraft,
)

TITLE_PREVIEW_LENGTH = 30

ROUTED_STATUSES = frozenset({DocumentStatus.sent, DocumentStatus.forwarded})

_SENDER_TEMPLATES: dict[DocumentStatus, str] = {
    DocumentStatus.received: (
        'Your document "{title}" was received by {actor} at {office}.'
    ),
    DocumentStatus.approved: 'Your document "{title}" was approved by {actor}.',
    DocumentStatus.completed: 'Your document "{title}" has been marked as completed.',
    DocumentStatus.disapproved: 'Your document "{title}" was disapproved by {actor}.',
}


def title_preview(title: str) -> str:
    if len(title) <= TITLE_PREVIEW_LENGTH:
        return title
    return f"{title[:TITLE_PREVIEW_LENGTH]}..."


def notifications_for(
    document: DocumentSnapshot,
    previous_status: DocumentStatus,
    actor: ActorSnapshot,
    users: Iterable[ActorSnapshot],
) -> list[NotificationDraft]:
    """Notifications owed to other users after ``document`` changed status.

    Recipients of a routed document hear about it (every member of the
    recipient office except the actor); the sender hears about progress.
    Nothing is produced when the status did not change.
    """
    new_status = document.status
    if new_status == previous_status:
        return []

    title = title_preview(document.title)
    drafts: list[NotificationDraft] = []

    if new_status in ROUTED_STATUSES:
        message = (
            f'Document "{title}" was sent to your office by '
            f"{actor.name} ({actor.office})."
        )
        for user in users:
            if user.office != document.recipient_office or user.id == actor.id:
                continue
            drafts.append(
                NotificationDraft(
                    user_id=user.id, document_id=document.id, message=message
                )
            )

    sender = document.sender
    template = _SENDER_TEMPLATES.get(new_status)
    if sender is not None and sender.id != actor.id and template:
        drafts.append(
            NotificationDraft(
                user_id=sender.id,
                document_id=document.id,
                message=template.format(
                    title=title, actor=actor.name, office=actor.office
                ),
            )
        )
    return drafts
