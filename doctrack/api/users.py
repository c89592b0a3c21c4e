from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from doctrack.api.deps import get_db, require_actor, require_super_admin
from doctrack.models.directory import User
from doctrack.schemas.common import ListResponse
from doctrack.schemas.directory import UserCreate, UserRead, UserUpdate
from doctrack.services.users import users

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_super_admin)],
)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    return users.create(db, payload)


@router.get("", response_model=ListResponse[UserRead])
def list_users(
    office: str | None = None,
    role: str | None = None,
    order_by: str = Query(default="name"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return users.list_response(db, office, role, order_by, order_dir, limit, offset)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return users.get(db, user_id)


@router.patch("/{user_id}", response_model=UserRead)
def update_user(
    user_id: str,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    actor: User = Depends(require_actor),
):
    return users.update(db, user_id, payload, actor)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_super_admin)],
)
def delete_user(user_id: str, db: Session = Depends(get_db)):
    users.delete(db, user_id)
