import logging

from doctrack.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="doctrack.tasks.events.process_event", ignore_result=True)
def process_event(
    event_type: str,
    entity_type: str,
    entity_id: str,
    actor_id: str | None = None,
    document_id: str | None = None,
    payload: dict | None = None,
) -> None:
    """Central fan-out task for tracking events.

    Transition events carry the notifications stored for them; each one is
    handed to the push task. Other events are only logged.
    """
    event_data = {
        "event_type": event_type,
        "entity_type": entity_type,
        "entity_id": entity_id,
        "actor_id": actor_id,
        "document_id": document_id,
        "payload": payload or {},
    }
    logger.info("Processing event %s for %s/%s", event_type, entity_type, entity_id)

    _fanout_notifications(event_data)


def _fanout_notifications(event_data: dict) -> None:
    notifications = event_data["payload"].get("notifications") or []
    if not notifications:
        return
    try:
        from doctrack.tasks.notifications import push_notification

        for item in notifications:
            push_notification.delay(
                notification_id=item["id"],
                user_id=item["user_id"],
                message=item["message"],
                document_id=event_data.get("document_id"),
            )
    except Exception as e:
        logger.exception("Failed to fan-out notifications: %s", e)
