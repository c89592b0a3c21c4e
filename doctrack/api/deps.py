from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from doctrack.db import SessionLocal
from doctrack.models.directory import User, UserRole
from doctrack.services.common import coerce_uuid

ACTOR_HEADER = "X-Actor-Id"


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_actor(
    x_actor_id: str | None = Header(default=None, alias=ACTOR_HEADER),
    db: Session = Depends(get_db),
) -> User | None:
    """Resolve the acting user. No header means a guest (``None``)."""
    if not x_actor_id:
        return None
    actor = db.get(User, coerce_uuid(x_actor_id))
    if actor is None:
        raise HTTPException(status_code=401, detail="Unknown actor")
    return actor


def require_actor(actor: User | None = Depends(get_current_actor)) -> User:
    if actor is None:
        raise HTTPException(
            status_code=401, detail=f"{ACTOR_HEADER} header is required"
        )
    return actor


def require_super_admin(actor: User = Depends(require_actor)) -> User:
    if actor.role != UserRole.super_admin:
        raise HTTPException(status_code=403, detail="Super Admin role required")
    return actor
