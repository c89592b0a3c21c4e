import uuid
from datetime import datetime, timezone

from doctrack.models.directory import UserRole
from doctrack.models.tracking import DeliveryType, DocumentStatus, Priority
from doctrack.schemas.tracking import ActorSnapshot, DocumentSnapshot
from doctrack.services.notification_policy import notifications_for, title_preview

T0 = datetime(2024, 3, 1, tzinfo=timezone.utc)


def _actor(name, office, role=UserRole.staff):
    return ActorSnapshot(id=uuid.uuid4(), name=name, office=office, role=role)


def _document(sender, status, recipient, title="Budget proposal"):
    return DocumentSnapshot(
        id=uuid.uuid4(),
        tracking_number="TDC-2024-03-555",
        title=title,
        description="For next fiscal year",
        category="Finance",
        priority=Priority.high,
        delivery_type=DeliveryType.internal,
        status=status,
        sender=sender,
        recipient_office=recipient,
        created_at=T0,
        updated_at=T0,
    )


RICHARD = _actor("Richard", "Cashier Section")
HANA = _actor("Hana", "HR Section")
HUGO = _actor("Hugo", "HR Section")
HELGA = _actor("Helga", "HR Section", UserRole.approver)
JOSH = _actor("Josh", "Records Section", UserRole.admin)
USERS = [RICHARD, HANA, HUGO, HELGA, JOSH]


class TestTitlePreview:
    def test_short_title_unchanged(self) -> None:
        assert title_preview("Budget proposal") == "Budget proposal"

    def test_long_title_truncated(self) -> None:
        title = "A" * 31
        assert title_preview(title) == "A" * 30 + "..."
        assert title_preview("B" * 30) == "B" * 30


class TestRoutedNotifications:
    def test_every_member_of_recipient_office(self) -> None:
        doc = _document(RICHARD, DocumentStatus.sent, "HR Section")
        drafts = notifications_for(doc, DocumentStatus.draft, RICHARD, USERS)
        assert {d.user_id for d in drafts} == {HANA.id, HUGO.id, HELGA.id}
        assert drafts[0].message == (
            'Document "Budget proposal" was sent to your office by '
            "Richard (Cashier Section)."
        )
        assert all(d.document_id == doc.id for d in drafts)

    def test_acting_member_is_skipped(self) -> None:
        # Forwarded back into the actor's own office by another route.
        doc = _document(RICHARD, DocumentStatus.forwarded, "HR Section")
        drafts = notifications_for(doc, DocumentStatus.received, HANA, USERS)
        recipients = {d.user_id for d in drafts}
        assert HANA.id not in recipients
        assert {HUGO.id, HELGA.id} <= recipients

    def test_empty_office(self) -> None:
        doc = _document(RICHARD, DocumentStatus.sent, "Accounting Section")
        assert notifications_for(doc, DocumentStatus.draft, RICHARD, USERS) == []


class TestSenderNotifications:
    def test_received(self) -> None:
        doc = _document(RICHARD, DocumentStatus.received, "HR Section")
        drafts = notifications_for(doc, DocumentStatus.sent, HANA, USERS)
        assert len(drafts) == 1
        assert drafts[0].user_id == RICHARD.id
        assert drafts[0].message == (
            'Your document "Budget proposal" was received by Hana at HR Section.'
        )

    def test_approved_completed_disapproved(self) -> None:
        expected = {
            DocumentStatus.approved: 'Your document "Budget proposal" was approved by Helga.',
            DocumentStatus.completed: 'Your document "Budget proposal" has been marked as completed.',
            DocumentStatus.disapproved: 'Your document "Budget proposal" was disapproved by Helga.',
        }
        for status, message in expected.items():
            doc = _document(RICHARD, status, "HR Section")
            drafts = notifications_for(doc, DocumentStatus.received, HELGA, USERS)
            assert [(d.user_id, d.message) for d in drafts] == [(RICHARD.id, message)]

    def test_sender_acting_is_not_notified(self) -> None:
        doc = _document(RICHARD, DocumentStatus.completed, "HR Section")
        assert notifications_for(doc, DocumentStatus.released, RICHARD, USERS) == []

    def test_no_sender(self) -> None:
        doc = _document(None, DocumentStatus.approved, "HR Section")
        assert notifications_for(doc, DocumentStatus.received, HELGA, USERS) == []

    def test_released_is_silent(self) -> None:
        doc = _document(RICHARD, DocumentStatus.released, "HR Section")
        assert notifications_for(doc, DocumentStatus.approved, JOSH, USERS) == []


class TestUnchangedStatus:
    def test_no_notifications(self) -> None:
        doc = _document(RICHARD, DocumentStatus.sent, "HR Section")
        assert notifications_for(doc, DocumentStatus.sent, RICHARD, USERS) == []
