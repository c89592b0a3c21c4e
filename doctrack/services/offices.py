from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from doctrack.models.directory import Office, User
from doctrack.schemas.directory import OfficeCreate
from doctrack.services.event import EventType, publish_event
from doctrack.services.response import ListResponseMixin

logger = logging.getLogger(__name__)


class Offices(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: OfficeCreate) -> Office:
        name = payload.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Office name is required")
        existing = db.scalars(
            select(Office).where(func.lower(Office.name) == name.lower())
        ).first()
        if existing:
            raise HTTPException(
                status_code=409, detail=f'Office "{existing.name}" already exists'
            )
        office = Office(name=name)
        db.add(office)
        db.commit()
        db.refresh(office)
        logger.info("Created office %s", office.name)
        publish_event(
            EventType.office_created, entity_type="office", entity_id=office.id
        )
        return office

    @staticmethod
    def get_by_name(db: Session, name: str) -> Office:
        office = db.scalars(select(Office).where(Office.name == name)).first()
        if not office:
            raise HTTPException(status_code=404, detail="Office not found")
        return office

    @staticmethod
    def exists(db: Session, name: str) -> bool:
        return db.scalars(select(Office.id).where(Office.name == name)).first() is not None

    @staticmethod
    def names(db: Session) -> list[str]:
        return list(db.scalars(select(Office.name).order_by(Office.name.asc())).all())

    @staticmethod
    def list(db: Session, limit: int, offset: int) -> list[Office]:
        stmt = select(Office).order_by(Office.name.asc()).limit(limit).offset(offset)
        return db.scalars(stmt).all()

    @staticmethod
    def delete(db: Session, name: str) -> None:
        office = Offices.get_by_name(db, name)
        blocking = db.scalar(
            select(func.count()).select_from(User).where(User.office == office.name)
        )
        if blocking:
            raise HTTPException(
                status_code=409,
                detail={
                    "code": "office_in_use",
                    "message": (
                        f'Office "{office.name}" cannot be deleted while '
                        f"{blocking} user(s) are assigned to it"
                    ),
                    "details": {"blocking_users": blocking},
                },
            )
        office_id = office.id
        db.delete(office)
        db.commit()
        logger.info("Deleted office %s", name)
        publish_event(EventType.office_deleted, entity_type="office", entity_id=office_id)


offices = Offices()
