"""
Todo Labels Backend — Todo Route Handlers
==========================================

What:  CRUD endpoints for todos.
Who:   Called by the client-side store (app.client) and the SPA.

Endpoints:
    GET    /todos[?label_id=X]  → 200 Todo[]
    POST   /todos               → 201 Todo
    GET    /todos/{id}          → 200 Todo | 404
    PUT    /todos/{id}          → 200 Todo | 404   (partial, same as PATCH)
    PATCH  /todos/{id}          → 200 Todo | 404
    DELETE /todos/{id}          → 204 (also when the todo is already gone)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import MAX_ID, ErrorResponse
from app.schemas.todo import TodoCreate, TodoResponse, TodoUpdate
from app.services.todo_service import todo_service

router = APIRouter(prefix="/todos", tags=["Todos"])


@router.get(
    "",
    response_model=List[TodoResponse],
    summary="List todos",
    description=(
        "Returns every todo with its labels embedded, in creation order. "
        "Pass label_id to keep only todos carrying that label."
    ),
)
async def list_todos(
    label_id: Optional[int] = Query(
        default=None,
        ge=1,
        le=MAX_ID,
        description="Only return todos associated with this label",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[TodoResponse]:
    return await todo_service.list_todos(db=db, label_id=label_id)


@router.post(
    "",
    status_code=201,
    response_model=TodoResponse,
    responses={
        400: {"description": "Empty text or unknown label ids", "model": ErrorResponse},
    },
    summary="Create a todo",
)
async def create_todo(
    payload: TodoCreate,
    db: AsyncSession = Depends(get_db_session),
) -> TodoResponse:
    return await todo_service.create_todo(db=db, text=payload.text, label_ids=payload.labels)


@router.get(
    "/{todo_id}",
    response_model=TodoResponse,
    responses={404: {"description": "Todo not found", "model": ErrorResponse}},
    summary="Get a single todo",
)
async def get_todo(
    todo_id: int = Path(ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
) -> TodoResponse:
    return await todo_service.get_todo(db=db, todo_id=todo_id)


@router.api_route(
    "/{todo_id}",
    methods=["PUT", "PATCH"],
    response_model=TodoResponse,
    responses={
        400: {"description": "Invalid text or unknown label ids", "model": ErrorResponse},
        404: {"description": "Todo not found", "model": ErrorResponse},
    },
    summary="Update a todo",
    description=(
        "Partial update. Omitted fields are kept. When `labels` is present it "
        "replaces the todo's whole label set atomically."
    ),
)
async def update_todo(
    payload: TodoUpdate,
    todo_id: int = Path(ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
) -> TodoResponse:
    return await todo_service.update_todo(
        db=db,
        todo_id=todo_id,
        text=payload.text,
        completed=payload.completed,
        label_ids=payload.labels,
    )


@router.delete(
    "/{todo_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a todo",
    description="Deletes the todo and its label associations. Idempotent.",
)
async def delete_todo(
    todo_id: int = Path(ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await todo_service.delete_todo(db=db, todo_id=todo_id)
    return Response(status_code=204)
