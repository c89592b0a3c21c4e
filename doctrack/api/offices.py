from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from doctrack.api.deps import get_db, require_super_admin
from doctrack.schemas.common import ListResponse
from doctrack.schemas.directory import OfficeCreate, OfficeRead
from doctrack.services.offices import offices

router = APIRouter(prefix="/offices", tags=["offices"])


@router.post(
    "",
    response_model=OfficeRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_super_admin)],
)
def create_office(payload: OfficeCreate, db: Session = Depends(get_db)):
    return offices.create(db, payload)


@router.get("", response_model=ListResponse[OfficeRead])
def list_offices(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return offices.list_response(db, limit, offset)


@router.delete(
    "/{name}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_super_admin)],
)
def delete_office(name: str, db: Session = Depends(get_db)):
    offices.delete(db, name)
