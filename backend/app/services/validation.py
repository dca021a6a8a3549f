"""Business-rule checks shared by the todo and label services."""

from typing import Iterable, List, Optional

from app.exceptions import ValidationError


def require_text(value: Optional[str], field: str, label: str, max_length: int) -> str:
    """
    Reject empty, whitespace-only, or over-long text.

    Returns the value unchanged; stored text is never trimmed.
    """
    if value is None or not value.strip():
        raise ValidationError(message=f"{label} can not be empty", field=field)
    if len(value) > max_length:
        raise ValidationError(
            message=f"{label} must be at most {max_length} characters",
            field=field,
            context={"max_length": max_length, "length": len(value)},
        )
    return value


def unique_ids(ids: Iterable[int]) -> List[int]:
    """Drop repeated ids, keeping first-seen order."""
    return list(dict.fromkeys(ids))
