"""Brain dump API routes."""
from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from braindump.api.schemas.brain_dump import BrainDumpCreateRequest, BrainDumpCreateResponse, BrainDumpRead
from braindump.core.auth import get_current_user_id
from braindump.core.errors import AuthenticationRequired
from braindump.db.deps import get_db
from braindump.observability.metrics import log_metric
from braindump.observability.tracing import annotate, trace
from braindump.services.brain_dump_service import create_brain_dump, get_brain_dump, list_recent_brain_dumps
from braindump.services.task_queue import TaskQueue, get_task_queue

router = APIRouter(prefix="/brain-dumps", tags=["brain-dumps"])

NOT_FOUND_DETAIL = "Brain dump not found"


@router.post("", response_model=BrainDumpCreateResponse, status_code=status.HTTP_201_CREATED)
def create_brain_dump_endpoint(
    payload: BrainDumpCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    queue: TaskQueue = Depends(get_task_queue),
    user_id: Optional[UUID] = Depends(get_current_user_id),
) -> BrainDumpCreateResponse:
    """Store a brain dump and schedule its analysis; returns before analysis runs."""
    request_id = getattr(http_request.state, "request_id", None)
    text_length = len(payload.original_text)
    metadata: Dict[str, Any] = {"route": "/brain-dumps", "text_length": text_length}

    with trace(
        "brain_dump.create",
        metadata=metadata,
        user_id=str(user_id) if user_id else None,
        request_id=request_id,
    ) as span:
        try:
            brain_dump_id = create_brain_dump(db, queue, user_id=user_id, original_text=payload.original_text)
        except AuthenticationRequired as exc:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
        except IntegrityError as exc:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save brain dump") from exc
        annotate(span, {**metadata, "brain_dump_id": str(brain_dump_id)})

    log_metric("brain_dump.created", 1, metadata={"user_id": str(user_id)})
    log_metric("brain_dump.text_length", text_length, metadata={"user_id": str(user_id)})

    return BrainDumpCreateResponse(id=brain_dump_id, processed=False, request_id=request_id or "")


@router.get("", response_model=List[BrainDumpRead])
def list_brain_dumps_endpoint(
    http_request: Request,
    db: Session = Depends(get_db),
    user_id: Optional[UUID] = Depends(get_current_user_id),
) -> List[BrainDumpRead]:
    """The caller's ten most recent brain dumps; empty for anonymous callers."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "brain_dump.list",
        metadata={"route": "/brain-dumps", "anonymous": user_id is None},
        user_id=str(user_id) if user_id else None,
        request_id=request_id,
    ) as span:
        rows = list_recent_brain_dumps(db, user_id=user_id)
        annotate(span, {"count": len(rows)})
    return [BrainDumpRead.model_validate(row) for row in rows]


@router.get("/{brain_dump_id}", response_model=BrainDumpRead)
def get_brain_dump_endpoint(
    brain_dump_id: str,
    http_request: Request,
    db: Session = Depends(get_db),
    user_id: Optional[UUID] = Depends(get_current_user_id),
) -> BrainDumpRead:
    """Fetch one brain dump; every absent case gets the same 404."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "brain_dump.get",
        metadata={"route": "/brain-dumps/{id}", "brain_dump_id": brain_dump_id},
        user_id=str(user_id) if user_id else None,
        request_id=request_id,
    ):
        brain_dump = get_brain_dump(db, user_id=user_id, brain_dump_id=brain_dump_id)
    if brain_dump is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)
    return BrainDumpRead.model_validate(brain_dump)
