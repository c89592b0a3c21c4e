import uuid
from unittest.mock import MagicMock, patch

from doctrack.services.event import EventType, publish_event


class TestEventType:
    def test_all_event_types_have_dotted_values(self) -> None:
        for et in EventType:
            assert "." in et.value, f"{et.name} value should contain a dot"

    def test_document_events(self) -> None:
        assert EventType.document_created.value == "document.created"
        assert EventType.document_updated.value == "document.updated"
        assert EventType.document_transitioned.value == "document.transitioned"

    def test_directory_events(self) -> None:
        assert EventType.user_created.value == "user.created"
        assert EventType.user_deleted.value == "user.deleted"
        assert EventType.office_created.value == "office.created"
        assert EventType.office_deleted.value == "office.deleted"


class TestPublishEvent:
    @patch("doctrack.tasks.events.process_event.delay")
    def test_publish_event_calls_delay(self, mock_delay: MagicMock) -> None:
        entity_id = uuid.uuid4()
        actor_id = uuid.uuid4()
        publish_event(
            EventType.document_transitioned,
            entity_type="document",
            entity_id=entity_id,
            actor_id=actor_id,
            document_id=entity_id,
            payload={"action": "send"},
        )
        mock_delay.assert_called_once_with(
            event_type="document.transitioned",
            entity_type="document",
            entity_id=str(entity_id),
            actor_id=str(actor_id),
            document_id=str(entity_id),
            payload={"action": "send"},
        )

    @patch("doctrack.tasks.events.process_event.delay")
    def test_publish_event_none_actor_and_document(self, mock_delay: MagicMock) -> None:
        entity_id = uuid.uuid4()
        publish_event(EventType.office_deleted, entity_type="office", entity_id=entity_id)
        mock_delay.assert_called_once_with(
            event_type="office.deleted",
            entity_type="office",
            entity_id=str(entity_id),
            actor_id=None,
            document_id=None,
            payload={},
        )

    @patch("doctrack.tasks.events.process_event.delay", side_effect=RuntimeError("down"))
    def test_publish_event_never_raises(self, mock_delay: MagicMock) -> None:
        publish_event(
            EventType.document_created,
            entity_type="document",
            entity_id=uuid.uuid4(),
        )
        # Should not raise
