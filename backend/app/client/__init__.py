# Client package init
"""
Todo Labels Client
===================

Client-side counterpart of the backend: TodoApiClient binds the HTTP API,
TodoStore holds the displayed todo/label state and re-fetches after every
mutation.
"""

from app.client.api import ApiError, TodoApiClient
from app.client.store import EditBuffer, StoreError, TodoStore

__all__ = ["ApiError", "EditBuffer", "StoreError", "TodoApiClient", "TodoStore"]
