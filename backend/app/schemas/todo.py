"""
Todo Labels Backend — Pydantic Request/Response Schemas
========================================================

What:  Pydantic models defining the API contract between client and backend.
Why:   FastAPI validates request bodies and serializes responses with them,
       and generates the OpenAPI document from them.

JSON shapes:
    Label: {"id": 1, "name": "urgent"}
    Todo:  {"id": 1, "text": "buy milk", "completed": false,
            "labels": [{"id": 1, "name": "urgent"}]}

Schemas only enforce types. Business rules (non-empty text, length limits,
label existence) live in the services so they surface as 400, not 422.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.common import EntityId


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class LabelResponse(BaseModel):
    id: int = Field(description="Label identifier")
    name: str = Field(description="Label name")

    model_config = {"from_attributes": True}


class TodoResponse(BaseModel):
    """
    Full todo representation with its labels embedded.

    Returned by every todo endpoint. `labels` is ordered by label id and
    never contains the same label twice.
    """
    id: int = Field(description="Todo identifier")
    text: str = Field(description="Todo text")
    completed: bool = Field(description="Whether the todo is done")
    labels: List[LabelResponse] = Field(
        default_factory=list,
        description="Labels attached to this todo",
    )

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class TodoCreate(BaseModel):
    text: str = Field(description="Todo text (1-100 characters)")
    labels: List[EntityId] = Field(
        default_factory=list,
        description="Label ids to attach on creation",
    )


class TodoUpdate(BaseModel):
    """
    Partial update payload for PUT/PATCH /todos/{id}.

    Omitted fields are left unchanged. `labels`, when present, replaces
    the whole label set (an empty list clears it).
    """
    text: Optional[str] = Field(default=None, description="New todo text")
    completed: Optional[bool] = Field(default=None, description="New completed flag")
    labels: Optional[List[EntityId]] = Field(
        default=None,
        description="Complete replacement set of label ids",
    )


class LabelCreate(BaseModel):
    name: str = Field(description="Label name (1-100 characters, unique)")
