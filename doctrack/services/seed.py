import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from doctrack.models.directory import Office, User, UserRole

logger = logging.getLogger(__name__)

DEFAULT_OFFICES = (
    "Cashier Section",
    "Records Section",
    "SGOD Section",
    "HR Section",
    "Accounting Section",
)

DEFAULT_USERS = (
    ("Richard", "Cashier", "Cashier Section", UserRole.staff),
    ("Josh", "Records Officer", "Records Section", UserRole.admin),
    ("Daisy", "Section Chief", "SGOD Section", UserRole.approver),
    ("System Administrator", "Administrator", "Records Section", UserRole.super_admin),
)


def seed_offices(db: Session) -> int:
    if db.scalar(select(func.count()).select_from(Office)):
        return 0
    db.add_all(Office(name=name) for name in DEFAULT_OFFICES)
    db.commit()
    logger.info("Seeded %d offices", len(DEFAULT_OFFICES))
    return len(DEFAULT_OFFICES)


def seed_users(db: Session) -> int:
    if db.scalar(select(func.count()).select_from(User)):
        return 0
    db.add_all(
        User(name=name, position=position, office=office, role=role)
        for name, position, office, role in DEFAULT_USERS
    )
    db.commit()
    logger.info("Seeded %d users", len(DEFAULT_USERS))
    return len(DEFAULT_USERS)


def seed_directory(db: Session) -> None:
    """Populate an empty directory. Tables that already hold rows are left alone."""
    seed_offices(db)
    seed_users(db)
