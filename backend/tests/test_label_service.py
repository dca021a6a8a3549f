"""
Todo Labels Backend — Label Service Tests
==========================================

What we test:
    ✅ Create/list ordering
    ✅ Duplicate names raise ConflictError, blank names ValidationError
    ✅ Delete detaches the label from every todo, idempotent
    ✅ SQLAlchemy failures are wrapped in DatabaseError
"""

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import ConflictError, DatabaseError, ValidationError
from app.services.label_service import LabelService, label_service
from app.services.todo_service import todo_service

from conftest import association_count


class TestCreateLabel:

    @pytest.mark.asyncio
    async def test_create_and_list_in_id_order(self, db_session):
        names = ["urgent", "home", "work"]
        created = [await label_service.create_label(db_session, name) for name in names]

        labels = await label_service.list_labels(db_session)

        assert labels == created
        assert [label.name for label in labels] == names

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, db_session):
        first = await label_service.create_label(db_session, "urgent")

        with pytest.raises(ConflictError, match="already exists") as exc_info:
            await label_service.create_label(db_session, "urgent")

        assert exc_info.value.context["label_id"] == first.id
        assert len(await label_service.list_labels(db_session)) == 1

    @pytest.mark.asyncio
    async def test_names_are_case_sensitive(self, db_session):
        await label_service.create_label(db_session, "urgent")
        await label_service.create_label(db_session, "Urgent")
        assert len(await label_service.list_labels(db_session)) == 2

    @pytest.mark.asyncio
    async def test_surrounding_whitespace_is_trimmed(self, db_session):
        created = await label_service.create_label(db_session, "  home ")
        assert created.name == "home"

        with pytest.raises(ConflictError):
            await label_service.create_label(db_session, "home ")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "  \t"])
    async def test_blank_name_rejected(self, db_session, name):
        with pytest.raises(ValidationError) as exc_info:
            await label_service.create_label(db_session, name)
        assert exc_info.value.field == "name"

    @pytest.mark.asyncio
    async def test_long_name_rejected(self, db_session):
        with pytest.raises(ValidationError):
            await label_service.create_label(db_session, "n" * 101)


class TestDeleteLabel:

    @pytest.mark.asyncio
    async def test_delete_detaches_from_all_todos(self, db_session):
        doomed = await label_service.create_label(db_session, "doomed")
        kept = await label_service.create_label(db_session, "kept")
        a = await todo_service.create_todo(db_session, "a", label_ids=[doomed.id, kept.id])
        b = await todo_service.create_todo(db_session, "b", label_ids=[doomed.id])

        await label_service.delete_label(db_session, doomed.id)

        assert [label.id for label in await label_service.list_labels(db_session)] == [kept.id]
        assert await association_count(db_session, label_id=doomed.id) == 0
        assert [lbl.id for lbl in (await todo_service.get_todo(db_session, a.id)).labels] == [kept.id]
        assert (await todo_service.get_todo(db_session, b.id)).labels == []

    @pytest.mark.asyncio
    async def test_delete_missing_label_is_noop(self, db_session):
        await label_service.delete_label(db_session, 404)

    @pytest.mark.asyncio
    async def test_name_reusable_after_delete(self, db_session):
        label = await label_service.create_label(db_session, "again")
        await label_service.delete_label(db_session, label.id)

        recreated = await label_service.create_label(db_session, "again")

        assert recreated.id != label.id


class TestLabelServiceErrors:
    """Database failures, using a mock session."""

    def setup_method(self):
        self.service = LabelService()

    @pytest.mark.asyncio
    async def test_list_wraps_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.list_labels(mock_db_session)

        assert exc_info.value.context["error_type"] == "OperationalError"

    @pytest.mark.asyncio
    async def test_delete_rolls_back_on_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("DELETE", {}, Exception("down"))

        with pytest.raises(DatabaseError):
            await self.service.delete_label(mock_db_session, 1)

        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()
