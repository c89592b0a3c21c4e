"""Document lifecycle engine.

Pure decision logic over immutable snapshots: no database access, no global
actor state. ``available_actions`` answers "what may this actor do now" and
``transition`` builds the replacement snapshot for one of those actions.

Permitted actions are looked up in ``TRANSITION_RULES``, keyed by the
document status and the actor's *standing* towards the document (sender,
holder, hub office, ...).
"""

from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from doctrack.models.directory import UserRole
from doctrack.models.tracking import DocumentStatus, HistoryAction
from doctrack.schemas.tracking import (
    ActorSnapshot,
    DocumentSnapshot,
    HistoryEntrySnapshot,
)

logger = logging.getLogger(__name__)


class DocumentAction(enum.Enum):
    send = "send"
    receive = "receive"
    forward = "forward"
    approve = "approve"
    complete = "complete"
    return_to_sender = "return_to_sender"
    cancel = "cancel"
    release = "release"
    finish = "finish"


class Standing(enum.Enum):
    sender = "sender"
    admin_role = "admin_role"
    at_recipient_office = "at_recipient_office"
    # Holder standings: the actor's office received the document last.
    # Exactly one applies, checked in this order.
    hub_holder = "hub_holder"
    sender_holder = "sender_holder"
    holder = "holder"


class ActionNotPermitted(Exception):
    pass


class InvalidTarget(ValueError):
    pass


@dataclass(frozen=True)
class ActionEffect:
    to_status: DocumentStatus
    label: HistoryAction


_S = DocumentStatus
_A = DocumentAction

TRANSITION_RULES: dict[tuple[DocumentStatus, Standing], frozenset[DocumentAction]] = {
    (_S.draft, Standing.sender): frozenset({_A.send}),
    (_S.sent, Standing.admin_role): frozenset({_A.receive}),
    (_S.sent, Standing.at_recipient_office): frozenset({_A.receive}),
    (_S.received, Standing.hub_holder): frozenset(
        {_A.forward, _A.approve, _A.complete}
    ),
    (_S.received, Standing.sender_holder): frozenset({_A.forward}),
    (_S.received, Standing.holder): frozenset(
        {_A.approve, _A.return_to_sender, _A.cancel}
    ),
    (_S.forwarded, Standing.at_recipient_office): frozenset({_A.receive}),
    (_S.approved, Standing.admin_role): frozenset({_A.complete, _A.release}),
    (_S.released, Standing.sender): frozenset({_A.finish}),
}

ACTION_EFFECTS: dict[DocumentAction, ActionEffect] = {
    _A.send: ActionEffect(_S.sent, HistoryAction.sent),
    _A.receive: ActionEffect(_S.received, HistoryAction.received),
    _A.forward: ActionEffect(_S.forwarded, HistoryAction.forwarded),
    _A.approve: ActionEffect(_S.approved, HistoryAction.approved),
    _A.complete: ActionEffect(_S.completed, HistoryAction.completed),
    _A.return_to_sender: ActionEffect(_S.forwarded, HistoryAction.returned_to_sender),
    _A.cancel: ActionEffect(_S.disapproved, HistoryAction.cancelled),
    _A.release: ActionEffect(_S.released, HistoryAction.released),
    _A.finish: ActionEffect(_S.completed, HistoryAction.transaction_finished),
}

# Stable presentation order for action lists.
ACTION_ORDER = tuple(DocumentAction)


def _is_sender(document: DocumentSnapshot, actor: ActorSnapshot) -> bool:
    return document.sender is not None and document.sender.id == actor.id


def standings(
    document: DocumentSnapshot, actor: ActorSnapshot, hub_office: str
) -> set[Standing]:
    result: set[Standing] = set()
    if _is_sender(document, actor):
        result.add(Standing.sender)
    if actor.role == UserRole.admin:
        result.add(Standing.admin_role)
    if actor.office == document.recipient_office:
        result.add(Standing.at_recipient_office)

    last = document.last_entry
    if last is not None and last.office == actor.office:
        if actor.office == hub_office:
            result.add(Standing.hub_holder)
        elif _is_sender(document, actor):
            result.add(Standing.sender_holder)
        else:
            result.add(Standing.holder)
    return result


def available_actions(
    document: DocumentSnapshot,
    actor: ActorSnapshot | None,
    hub_office: str,
) -> frozenset[DocumentAction]:
    """Return the actions ``actor`` may take on ``document`` right now.

    An empty set means "nothing to do" for this viewer; it is not an error.
    """
    if actor is None:
        return frozenset()
    actions: set[DocumentAction] = set()
    for standing in standings(document, actor, hub_office):
        actions |= TRANSITION_RULES.get((document.status, standing), frozenset())
    if document.sender is None:
        actions.discard(DocumentAction.return_to_sender)
    return frozenset(actions)


def ordered(actions: Iterable[DocumentAction]) -> list[DocumentAction]:
    chosen = set(actions)
    return [action for action in ACTION_ORDER if action in chosen]


def forward_targets(offices: Iterable[str], actor: ActorSnapshot) -> list[str]:
    """Offices a document may be forwarded to by ``actor``."""
    return sorted({office for office in offices if office and office != actor.office})


def _previous_office(document: DocumentSnapshot) -> str:
    last = document.last_entry
    if last is not None and last.office:
        return last.office
    if document.sender is not None:
        return document.sender.office
    return "the previous office"


def _default_remarks(
    document: DocumentSnapshot, action: DocumentAction, hub_office: str
) -> str | None:
    status = document.status
    if action == DocumentAction.send:
        return f"Sent to {document.recipient_office}"
    if action == DocumentAction.receive:
        return f"Received from {_previous_office(document)}"
    if status == DocumentStatus.received and document.last_entry is not None:
        if document.last_entry.office == hub_office:
            if action == DocumentAction.approve:
                return "Directly approved by Admin"
            if action == DocumentAction.complete:
                return "Transaction ended by Admin"
    if action == DocumentAction.complete:
        return "Transaction Ended"
    if action == DocumentAction.release:
        return "Marked for release"
    if action == DocumentAction.finish:
        return "Released document received by sender."
    return None


def _join_remarks(prefix: str | None, remarks: str | None) -> str | None:
    remarks = (remarks or "").strip() or None
    if prefix is None:
        return remarks
    return f"{prefix}: {remarks}" if remarks else prefix


def make_history_entry(
    actor: ActorSnapshot,
    label: HistoryAction,
    at: datetime,
    remarks: str | None = None,
) -> HistoryEntrySnapshot:
    return HistoryEntrySnapshot(
        id=uuid.uuid4(),
        timestamp=at,
        action=label.value,
        actor_id=actor.id,
        actor_name=actor.name,
        actor_role=actor.role.value,
        office=actor.office,
        remarks=remarks,
    )


def transition(
    document: DocumentSnapshot,
    actor: ActorSnapshot | None,
    action: DocumentAction,
    hub_office: str,
    target_office: str | None = None,
    remarks: str | None = None,
    at: datetime | None = None,
    *,
    default_remarks: str | None = None,
) -> DocumentSnapshot:
    """Apply ``action`` and return the replacement snapshot.

    The input snapshot is never modified. The new history entry is placed at
    index 0 and ``updated_at`` is set to its timestamp.

    The entry remarks start from the generated text for the action (or
    ``default_remarks`` when given); caller ``remarks`` are appended to it.
    """
    if actor is None or action not in available_actions(document, actor, hub_office):
        raise ActionNotPermitted(
            f"{action.value} is not available on a {document.status.value} document"
        )

    effect = ACTION_EFFECTS[action]
    recipient_office = document.recipient_office
    base = default_remarks or _default_remarks(document, action, hub_office)

    if action == DocumentAction.forward:
        target = (target_office or "").strip()
        if not target:
            raise InvalidTarget("A target office is required to forward")
        if target == actor.office:
            raise InvalidTarget("Cannot forward a document to your own office")
        recipient_office = target
        base = f"Forwarded to {target}"
    elif action == DocumentAction.return_to_sender:
        # available_actions guarantees a sender here.
        recipient_office = document.sender.office
        base = f"Returned to Sender ({recipient_office})"

    text = _join_remarks(base, remarks)

    entry = make_history_entry(actor, effect.label, at or datetime.now(timezone.utc), text)
    logger.debug(
        "Transition %s on %s: %s -> %s",
        action.value,
        document.tracking_number,
        document.status.value,
        effect.to_status.value,
    )
    return document.model_copy(
        update={
            "status": effect.to_status,
            "recipient_office": recipient_office,
            "updated_at": entry.timestamp,
            "history": (entry, *document.history),
        }
    )


def receive_via_tracking(
    document: DocumentSnapshot,
    actor: ActorSnapshot,
    hub_office: str,
    at: datetime | None = None,
) -> DocumentSnapshot:
    return transition(
        document,
        actor,
        DocumentAction.receive,
        hub_office,
        at=at,
        default_remarks=(
            f"Received via QR Scan/Manual Track from {_previous_office(document)}."
        ),
    )
