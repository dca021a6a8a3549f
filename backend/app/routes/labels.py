"""
Todo Labels Backend — Label Route Handlers
===========================================

Endpoints:
    GET    /labels       → 200 Label[]
    POST   /labels       → 201 Label | 400 | 409 (duplicate name)
    DELETE /labels/{id}  → 204 (also when the label is already gone)
"""

from typing import List

from fastapi import APIRouter, Depends, Path, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import MAX_ID, ErrorResponse
from app.schemas.todo import LabelCreate, LabelResponse
from app.services.label_service import label_service

router = APIRouter(prefix="/labels", tags=["Labels"])


@router.get("", response_model=List[LabelResponse], summary="List labels")
async def list_labels(db: AsyncSession = Depends(get_db_session)) -> List[LabelResponse]:
    return await label_service.list_labels(db=db)


@router.post(
    "",
    status_code=201,
    response_model=LabelResponse,
    responses={
        400: {"description": "Empty or too long name", "model": ErrorResponse},
        409: {"description": "A label with this name exists", "model": ErrorResponse},
    },
    summary="Create a label",
)
async def create_label(
    payload: LabelCreate,
    db: AsyncSession = Depends(get_db_session),
) -> LabelResponse:
    return await label_service.create_label(db=db, name=payload.name)


@router.delete(
    "/{label_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a label",
    description="Deletes the label and detaches it from every todo. Idempotent.",
)
async def delete_label(
    label_id: int = Path(ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await label_service.delete_label(db=db, label_id=label_id)
    return Response(status_code=204)
