from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from doctrack.models.directory import User, UserRole
from doctrack.models.tracking import Document, Notification
from doctrack.schemas.directory import UserCreate, UserUpdate
from doctrack.schemas.tracking import ActorSnapshot
from doctrack.services.common import apply_ordering, apply_pagination, coerce_uuid
from doctrack.services.event import EventType, publish_event
from doctrack.services.offices import Offices
from doctrack.services.response import ListResponseMixin

logger = logging.getLogger(__name__)

_ADMIN_ONLY_FIELDS = {"office", "role"}


def _ensure_office(db: Session, name: str) -> None:
    if not Offices.exists(db, name):
        raise HTTPException(status_code=400, detail=f"Unknown office: {name}")


class Users(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: UserCreate) -> User:
        _ensure_office(db, payload.office)
        user = User(**payload.model_dump())
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Created user %s (%s)", user.id, user.role.value)
        publish_event(EventType.user_created, entity_type="user", entity_id=user.id)
        return user

    @staticmethod
    def get(db: Session, user_id: str) -> User:
        user = db.get(User, coerce_uuid(user_id))
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    @staticmethod
    def list(
        db: Session,
        office: str | None,
        role: str | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ) -> list[User]:
        stmt = select(User)
        if office is not None:
            stmt = stmt.where(User.office == office)
        if role is not None:
            try:
                stmt = stmt.where(User.role == UserRole(role))
            except ValueError:
                raise HTTPException(status_code=400, detail=f"Invalid role: {role}")
        stmt = apply_ordering(
            stmt,
            order_by,
            order_dir,
            {"name": User.name, "office": User.office, "created_at": User.created_at},
        )
        return db.scalars(apply_pagination(stmt, limit, offset)).all()

    @staticmethod
    def snapshots(db: Session) -> list[ActorSnapshot]:
        return [ActorSnapshot.model_validate(u) for u in db.scalars(select(User)).all()]

    @staticmethod
    def update(db: Session, user_id: str, payload: UserUpdate, actor: User) -> User:
        user = Users.get(db, user_id)
        data = payload.model_dump(exclude_unset=True)
        is_super_admin = actor.role == UserRole.super_admin
        if not is_super_admin:
            if actor.id != user.id:
                raise HTTPException(
                    status_code=403, detail="You can only edit your own profile"
                )
            if _ADMIN_ONLY_FIELDS & data.keys():
                raise HTTPException(
                    status_code=403,
                    detail="Only a Super Admin can change office or role",
                )
        if data.get("office") is not None:
            _ensure_office(db, data["office"])
        for key, value in data.items():
            if value is None and key in {"name", "office", "role"}:
                continue
            setattr(user, key, value)
        db.commit()
        db.refresh(user)
        logger.info("Updated user %s", user.id)
        return user

    @staticmethod
    def delete(db: Session, user_id: str) -> None:
        user = Users.get(db, user_id)
        if user.role == UserRole.super_admin:
            raise HTTPException(
                status_code=400, detail="A Super Admin account cannot be deleted"
            )
        # Documents keep existing with an unknown sender.
        cleared = db.execute(
            update(Document)
            .where(Document.sender_id == user.id)
            .values(sender_id=None)
            .execution_options(synchronize_session="fetch")
        ).rowcount
        db.execute(delete(Notification).where(Notification.user_id == user.id))
        db.delete(user)
        db.commit()
        logger.info(
            "Deleted user %s; cleared sender on %d document(s)", user_id, cleared or 0
        )
        publish_event(EventType.user_deleted, entity_type="user", entity_id=user_id)


users = Users()
