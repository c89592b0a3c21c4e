from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from doctrack.api.deps import get_db, require_actor
from doctrack.models.directory import User
from doctrack.schemas.common import ListResponse
from doctrack.schemas.notification import (
    MarkReadRequest,
    NotificationRead,
    UnreadCountResponse,
)
from doctrack.services.notification import notifications

# Every route works on the acting user's own inbox.
router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    db: Session = Depends(get_db), actor: User = Depends(require_actor)
):
    count = notifications.unread_count(db, str(actor.id))
    return {"count": count}


@router.get("", response_model=ListResponse[NotificationRead])
def list_notifications(
    is_read: bool | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=25, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    actor: User = Depends(require_actor),
):
    return notifications.list_response(
        db,
        str(actor.id),
        is_read,
        is_active,
        order_by,
        order_dir,
        limit,
        offset,
    )


@router.post("/mark-read")
def mark_read(
    payload: MarkReadRequest,
    db: Session = Depends(get_db),
    actor: User = Depends(require_actor),
):
    count = notifications.mark_read(
        db, str(actor.id), [str(nid) for nid in payload.notification_ids]
    )
    return {"marked": count}


@router.post("/mark-all-read")
def mark_all_read(
    db: Session = Depends(get_db), actor: User = Depends(require_actor)
):
    count = notifications.mark_all_read(db, str(actor.id))
    return {"marked": count}


@router.get("/{notification_id}", response_model=NotificationRead)
def get_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    actor: User = Depends(require_actor),
):
    return notifications.get(db, notification_id, str(actor.id))


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def dismiss_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    actor: User = Depends(require_actor),
):
    notifications.dismiss(db, notification_id, str(actor.id))
