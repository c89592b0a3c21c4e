from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from doctrack.api.deps import (
    get_current_actor,
    get_db,
    require_actor,
    require_super_admin,
)
from doctrack.models.directory import User
from doctrack.schemas.common import ListResponse
from doctrack.schemas.tracking import (
    ActionRequest,
    AvailableActionsRead,
    ClassificationRead,
    ClassifyRequest,
    DocumentCreate,
    DocumentRead,
    DocumentSummaryRead,
    DocumentUpdate,
    TrackRequest,
    TrackResult,
    TransactionLogRead,
)
from doctrack.services.classifier import classify_or_default
from doctrack.services.documents import documents

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=DocumentRead, status_code=status.HTTP_201_CREATED)
def create_document(
    payload: DocumentCreate,
    db: Session = Depends(get_db),
    actor: User = Depends(require_actor),
):
    return documents.create(db, payload, actor)


@router.get("", response_model=ListResponse[DocumentRead])
def list_documents(
    q: str | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    actor: User | None = Depends(get_current_actor),
):
    return documents.list_response(db, actor, q, limit, offset)


@router.get("/summary", response_model=DocumentSummaryRead)
def document_summary(
    db: Session = Depends(get_db),
    actor: User | None = Depends(get_current_actor),
):
    return documents.summary(db, actor)


@router.post("/track", response_model=TrackResult)
def track_document(
    payload: TrackRequest,
    db: Session = Depends(get_db),
    actor: User | None = Depends(get_current_actor),
):
    outcome, document = documents.track(db, payload.tracking_number, actor)
    return {"outcome": outcome, "document": document}


@router.post("/classify", response_model=ClassificationRead)
def classify_description(payload: ClassifyRequest):
    result = classify_or_default(payload.description)
    return {
        "category": result.category,
        "priority": result.priority,
        "classified": result.classified,
    }


@router.get(
    "/transaction-logs",
    response_model=ListResponse[TransactionLogRead],
    dependencies=[Depends(require_super_admin)],
)
def list_transaction_logs(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    items = documents.transaction_logs(db, limit, offset)
    return {"items": items, "count": len(items), "limit": limit, "offset": offset}


@router.get("/{document_id}", response_model=DocumentRead)
def get_document(
    document_id: str,
    db: Session = Depends(get_db),
    actor: User | None = Depends(get_current_actor),
):
    return documents.get_for(db, document_id, actor)


@router.patch("/{document_id}", response_model=DocumentRead)
def update_document(
    document_id: str,
    payload: DocumentUpdate,
    db: Session = Depends(get_db),
    actor: User = Depends(require_actor),
):
    return documents.update_draft(db, document_id, payload, actor)


@router.get("/{document_id}/actions", response_model=AvailableActionsRead)
def get_available_actions(
    document_id: str,
    db: Session = Depends(get_db),
    actor: User | None = Depends(get_current_actor),
):
    return documents.actions(db, document_id, actor)


@router.post("/{document_id}/actions", response_model=DocumentRead)
def apply_document_action(
    document_id: str,
    payload: ActionRequest,
    db: Session = Depends(get_db),
    actor: User = Depends(require_actor),
):
    return documents.apply_action(db, document_id, payload, actor)
