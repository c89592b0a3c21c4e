import logging

from doctrack.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="doctrack.tasks.notifications.push_notification", ignore_result=True)
def push_notification(
    notification_id: str,
    user_id: str,
    message: str,
    document_id: str | None = None,
) -> None:
    """Deliver a stored notification to the user's devices.

    Placeholder; a real implementation would hand off to a push service.
    """
    logger.info(
        "Would push notification %s to user %s (document %s): %s",
        notification_id,
        user_id,
        document_id,
        message,
    )
