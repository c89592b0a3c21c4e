from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from doctrack.metrics import NOTIFICATIONS_CREATED
from doctrack.models.directory import User
from doctrack.models.tracking import Notification
from doctrack.schemas.tracking import NotificationDraft
from doctrack.services.common import apply_ordering, apply_pagination, coerce_uuid
from doctrack.services.response import ListResponseMixin

logger = logging.getLogger(__name__)


def _ensure_user(db: Session, user_id: str) -> None:
    if not db.get(User, coerce_uuid(user_id)):
        raise HTTPException(status_code=404, detail="User not found")


class Notifications(ListResponseMixin):
    @staticmethod
    def create_many(
        db: Session, drafts: Iterable[NotificationDraft]
    ) -> List[Notification]:
        """Stage one row per draft and commit them together."""
        created = [
            Notification(
                user_id=draft.user_id,
                document_id=draft.document_id,
                message=draft.message,
            )
            for draft in drafts
        ]
        if not created:
            return []
        db.add_all(created)
        db.commit()
        NOTIFICATIONS_CREATED.inc(len(created))
        logger.info("Created %d notifications", len(created))
        return created

    @staticmethod
    def get(db: Session, notification_id: str, user_id: str) -> Notification:
        """Fetch one of ``user_id``'s notifications; anyone else's is a 404."""
        notification = (
            db.query(Notification)
            .filter(
                Notification.id == coerce_uuid(notification_id),
                Notification.user_id == coerce_uuid(user_id),
            )
            .first()
        )
        if not notification:
            raise HTTPException(status_code=404, detail="Notification not found")
        return notification

    @staticmethod
    def list(
        db: Session,
        user_id: str,
        is_read: bool | None,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ) -> List[Notification]:
        query = db.query(Notification).filter(
            Notification.user_id == coerce_uuid(user_id)
        )
        if is_read is not None:
            query = query.filter(Notification.is_read == is_read)
        if is_active is None:
            query = query.filter(Notification.is_active.is_(True))
        else:
            query = query.filter(Notification.is_active == is_active)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": Notification.created_at},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def mark_read(db: Session, user_id: str, notification_ids: List[str]) -> int:
        targets = [Notifications.get(db, nid, user_id) for nid in notification_ids]
        now = datetime.now(timezone.utc)
        count = 0
        for notification in targets:
            if not notification.is_read:
                notification.is_read = True
                notification.read_at = now
                count += 1
        db.commit()
        logger.info("Marked %d notifications as read for user %s", count, user_id)
        return count

    @staticmethod
    def mark_all_read(db: Session, user_id: str) -> int:
        _ensure_user(db, user_id)
        now = datetime.now(timezone.utc)
        unread = (
            db.query(Notification)
            .filter(
                Notification.user_id == coerce_uuid(user_id),
                Notification.is_read.is_(False),
                Notification.is_active.is_(True),
            )
            .all()
        )
        for n in unread:
            n.is_read = True
            n.read_at = now
        db.commit()
        logger.info(
            "Marked all %d notifications as read for user %s", len(unread), user_id
        )
        return len(unread)

    @staticmethod
    def unread_count(db: Session, user_id: str) -> int:
        _ensure_user(db, user_id)
        return (
            db.query(Notification)
            .filter(
                Notification.user_id == coerce_uuid(user_id),
                Notification.is_read.is_(False),
                Notification.is_active.is_(True),
            )
            .count()
        )

    @staticmethod
    def dismiss(db: Session, notification_id: str, user_id: str) -> None:
        notification = Notifications.get(db, notification_id, user_id)
        notification.is_active = False
        db.commit()
        logger.info("Dismissed notification %s", notification_id)


notifications = Notifications()
