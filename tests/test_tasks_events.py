import logging
from unittest.mock import MagicMock, call, patch

from doctrack.tasks.events import process_event
from doctrack.tasks.notifications import push_notification


class TestProcessEventTask:
    @patch("doctrack.tasks.notifications.push_notification.delay")
    def test_fans_out_each_notification(self, mock_push: MagicMock) -> None:
        process_event(
            event_type="document.transitioned",
            entity_type="document",
            entity_id="doc1",
            actor_id="actor1",
            document_id="doc1",
            payload={
                "action": "send",
                "notifications": [
                    {"id": "n1", "user_id": "u1", "message": "first"},
                    {"id": "n2", "user_id": "u2", "message": "second"},
                ],
            },
        )
        assert mock_push.call_args_list == [
            call(notification_id="n1", user_id="u1", message="first", document_id="doc1"),
            call(notification_id="n2", user_id="u2", message="second", document_id="doc1"),
        ]

    @patch("doctrack.tasks.notifications.push_notification.delay")
    def test_events_without_notifications(self, mock_push: MagicMock) -> None:
        process_event(event_type="office.created", entity_type="office", entity_id="o1")
        mock_push.assert_not_called()

    @patch(
        "doctrack.tasks.notifications.push_notification.delay",
        side_effect=RuntimeError("broker down"),
    )
    def test_fanout_failure_is_swallowed(self, mock_push: MagicMock) -> None:
        process_event(
            event_type="document.transitioned",
            entity_type="document",
            entity_id="doc1",
            payload={"notifications": [{"id": "n1", "user_id": "u1", "message": "m"}]},
        )
        mock_push.assert_called_once()


class TestPushNotificationTask:
    def test_logs_delivery(self, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="doctrack.tasks.notifications"):
            push_notification(
                notification_id="n1", user_id="u1", message="hello", document_id="d1"
            )
        assert "Would push notification n1 to user u1" in caplog.text

    def test_runs_eagerly_through_publish(self, db_session, staff, hr_staff, make_document) -> None:
        from doctrack.schemas.tracking import ActionRequest
        from doctrack.services.documents import documents

        doc = make_document(staff, "HR Section")
        with patch("doctrack.tasks.notifications.logger") as task_logger:
            documents.apply_action(
                db_session, str(doc.id), ActionRequest(action="send"), staff
            )
        pushed = [c.args for c in task_logger.info.call_args_list]
        assert len(pushed) == 1
        assert pushed[0][2] == str(hr_staff.id)
