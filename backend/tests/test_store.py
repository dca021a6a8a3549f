"""
Todo Labels Client — Store Tests
=================================

What:  TodoStore driving the real app through TodoApiClient over ASGITransport.

What we test:
    ✅ Lists are re-fetched after every mutation
    ✅ Label filter is applied locally, without requests
    ✅ Blank todo text never reaches the server
    ✅ Edit buffer: begin, toggle labels, commit, cancel
    ✅ Failed actions leave state untouched and record a StoreError
"""

import httpx
import pytest
import pytest_asyncio

from app.client import ApiError, EditBuffer, TodoApiClient, TodoStore


@pytest.fixture
def recorded_requests(test_client):
    """Every request the store sends, as (method, path) tuples."""
    seen = []

    async def record(request: httpx.Request):
        seen.append((request.method, request.url.path))

    test_client.event_hooks = {"request": [record], "response": []}
    return seen


@pytest_asyncio.fixture
async def store(api_client, recorded_requests):
    store = TodoStore(api_client)
    await store.load()
    recorded_requests.clear()
    return store


class TestEditBuffer:

    def test_toggle_label_adds_then_removes(self):
        buffer = EditBuffer(todo_id=1, text="t", label_ids=[3])

        buffer.toggle_label(5)
        assert buffer.label_ids == [3, 5]

        buffer.toggle_label(3)
        assert buffer.label_ids == [5]


class TestTodoStore:

    @pytest.mark.asyncio
    async def test_load_starts_empty(self, store):
        assert store.todos == []
        assert store.labels == []
        assert store.error is None

    @pytest.mark.asyncio
    async def test_add_todo_refetches(self, store, recorded_requests):
        created = await store.add_todo("buy milk")

        assert [todo.id for todo in store.todos] == [created.id]
        assert recorded_requests == [("POST", "/todos"), ("GET", "/todos")]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   "])
    async def test_blank_todo_sends_nothing(self, store, recorded_requests, text):
        assert await store.add_todo(text) is None
        assert recorded_requests == []
        assert store.todos == []

    @pytest.mark.asyncio
    async def test_toggle_completed(self, store):
        todo = await store.add_todo("stretch")

        await store.toggle_completed(todo.id)
        assert store.find_todo(todo.id).completed is True

        await store.toggle_completed(todo.id)
        assert store.find_todo(todo.id).completed is False

    @pytest.mark.asyncio
    async def test_delete_todo_refetches(self, store, recorded_requests):
        first = await store.add_todo("first")
        second = await store.add_todo("second")
        recorded_requests.clear()

        await store.delete_todo(first.id)

        assert [todo.id for todo in store.todos] == [second.id]
        assert recorded_requests == [("DELETE", f"/todos/{first.id}"), ("GET", "/todos")]

    @pytest.mark.asyncio
    async def test_filter_is_client_side(self, store, recorded_requests):
        urgent = await store.add_label("urgent")
        milk = await store.add_todo("buy milk", label_ids=[urgent.id])
        await store.add_todo("read")
        recorded_requests.clear()

        store.select_label(urgent.id)
        assert [todo.id for todo in store.visible_todos] == [milk.id]

        store.select_label(None)
        assert len(store.visible_todos) == 2
        assert recorded_requests == []

    @pytest.mark.asyncio
    async def test_delete_selected_label_clears_filter(self, store):
        label = await store.add_label("temp")
        todo = await store.add_todo("t", label_ids=[label.id])
        store.select_label(label.id)

        await store.delete_label(label.id)

        assert store.selected_label_id is None
        assert store.labels == []
        assert store.find_todo(todo.id).labels == []

    @pytest.mark.asyncio
    async def test_edit_commit(self, store):
        a = await store.add_label("a")
        b = await store.add_label("b")
        todo = await store.add_todo("draft", label_ids=[a.id])

        buffer = store.begin_edit(todo.id)
        buffer.text = "final"
        buffer.toggle_label(a.id)
        buffer.toggle_label(b.id)
        updated = await store.commit_edit()

        assert store.editing is None
        assert updated.text == "final"
        assert [label.id for label in store.find_todo(todo.id).labels] == [b.id]

    @pytest.mark.asyncio
    async def test_edit_cancel_sends_nothing(self, store, recorded_requests):
        todo = await store.add_todo("keep")
        recorded_requests.clear()

        store.begin_edit(todo.id).text = "discarded"
        store.cancel_edit()

        assert store.editing is None
        assert await store.commit_edit() is None
        assert store.find_todo(todo.id).text == "keep"
        assert recorded_requests == []

    @pytest.mark.asyncio
    async def test_failed_action_records_error(self, store):
        await store.add_label("urgent")

        with pytest.raises(ApiError) as exc_info:
            await store.add_label("urgent")

        assert exc_info.value.status_code == 409
        assert store.error.action == "add_label"
        assert store.error.status_code == 409
        assert [label.name for label in store.labels] == ["urgent"]

        await store.add_todo("next action succeeds")
        assert store.error is None

    @pytest.mark.asyncio
    async def test_failed_edit_discards_buffer(self, store):
        todo = await store.add_todo("t")
        store.begin_edit(todo.id).text = ""

        with pytest.raises(ApiError):
            await store.commit_edit()

        assert store.editing is None
        assert store.error.status_code == 400
        assert store.find_todo(todo.id).text == "t"


class TestApiClientErrors:

    @pytest.mark.asyncio
    async def test_network_failure_is_api_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(
            transport=httpx.MockTransport(refuse), base_url="http://test"
        )
        async with TodoApiClient(client=client) as api:
            with pytest.raises(ApiError) as exc_info:
                await api.list_todos()
        await client.aclose()

        assert exc_info.value.status_code == 0
        assert exc_info.value.error == "network_error"

    @pytest.mark.asyncio
    async def test_validation_422_body_is_readable(self, api_client):
        with pytest.raises(ApiError) as exc_info:
            await api_client._request("POST", "/todos", json={"labels": "nope"})

        assert exc_info.value.status_code == 422
        assert exc_info.value.message
