"""Unit tests for the in-memory fallback backend."""

import pytest

from app.schemas.responses import ResponseStatus, SurveySpec
from app.storage.base import MEMORY_SURVEY_ID
from app.storage.memory import MemoryBackend


class TestMemoryBackend:
    """Test suite for MemoryBackend."""

    @pytest.mark.asyncio
    async def test_create_and_get_by_token(self, memory_backend):
        """Test a created response can be read back by token."""
        created = await memory_backend.create_response(
            MEMORY_SURVEY_ID, "tok_one", {"role": "Engineer"}
        )

        loaded = await memory_backend.get_by_token("tok_one")

        assert loaded is not None
        assert loaded.id == created.id
        assert loaded.status == ResponseStatus.PARTIAL
        assert loaded.data == {"role": "Engineer"}
        assert created.id.startswith("mem_")

    @pytest.mark.asyncio
    async def test_unknown_token_returns_none(self, memory_backend):
        """Test unknown tokens are not found rather than errors."""
        assert await memory_backend.get_by_token("tok_missing") is None
        assert await memory_backend.find_response_id("tok_missing") is None

    @pytest.mark.asyncio
    async def test_duplicate_token_rejected(self, memory_backend):
        """Test a token can only be stored once."""
        await memory_backend.create_response(MEMORY_SURVEY_ID, "tok_dup", {})

        with pytest.raises(ValueError, match="already in use"):
            await memory_backend.create_response(MEMORY_SURVEY_ID, "tok_dup", {})

    @pytest.mark.asyncio
    async def test_apply_patch_merges_by_key(self, memory_backend):
        """Test patches overwrite listed keys and keep the rest."""
        created = await memory_backend.create_response(
            MEMORY_SURVEY_ID, "tok_p", {"role": "Engineer", "team": "Core"}
        )

        assert await memory_backend.apply_patch(created.id, {"team": "Infra", "site": "Remote"})

        loaded = await memory_backend.get_by_token("tok_p")
        assert loaded.data == {"role": "Engineer", "team": "Infra", "site": "Remote"}
        assert loaded.updated_at >= loaded.created_at

    @pytest.mark.asyncio
    async def test_apply_patch_unknown_id(self, memory_backend):
        """Test patching a missing response reports failure."""
        assert await memory_backend.apply_patch("mem_missing", {"a": 1}) is False

    @pytest.mark.asyncio
    async def test_mark_submitted(self, memory_backend):
        """Test submission sets the status and stays submitted."""
        created = await memory_backend.create_response(MEMORY_SURVEY_ID, "tok_s", {})

        assert await memory_backend.mark_submitted(created.id)
        assert await memory_backend.mark_submitted(created.id)

        loaded = await memory_backend.get_by_token("tok_s")
        assert loaded.status == ResponseStatus.SUBMITTED

    @pytest.mark.asyncio
    async def test_mark_submitted_unknown_id(self, memory_backend):
        """Test submitting a missing response reports failure."""
        assert await memory_backend.mark_submitted("mem_missing") is False

    @pytest.mark.asyncio
    async def test_list_responses_in_insertion_order(self, memory_backend):
        """Test listing returns every response in creation order."""
        first = await memory_backend.create_response(MEMORY_SURVEY_ID, "tok_1", {"a": 1})
        second = await memory_backend.create_response(MEMORY_SURVEY_ID, "tok_2", {"b": 2})

        rows = await memory_backend.list_responses()

        assert [row.id for row in rows] == [first.id, second.id]
        assert rows[1].data == {"b": 2}

    @pytest.mark.asyncio
    async def test_returned_data_is_a_copy(self, memory_backend):
        """Test callers cannot mutate stored answers through results."""
        source = {"prefs": {"color": "blue"}}
        await memory_backend.create_response(MEMORY_SURVEY_ID, "tok_c", source)
        source["prefs"]["color"] = "red"

        loaded = await memory_backend.get_by_token("tok_c")
        loaded.data["prefs"]["color"] = "green"

        again = await memory_backend.get_by_token("tok_c")
        assert again.data == {"prefs": {"color": "blue"}}

    @pytest.mark.asyncio
    async def test_survey_lookups_return_sentinel(self, memory_backend):
        """Test the memory backend has a single sentinel survey."""
        spec = SurveySpec(id="s", version=1)

        assert await memory_backend.find_survey("s", 1) == MEMORY_SURVEY_ID
        assert await memory_backend.create_survey(spec) == MEMORY_SURVEY_ID

    @pytest.mark.asyncio
    async def test_close_discards_everything(self, memory_backend):
        """Test closing the store empties it."""
        await memory_backend.create_response(MEMORY_SURVEY_ID, "tok_x", {})
        assert len(memory_backend) == 1

        await memory_backend.close()

        assert len(memory_backend) == 0
        assert await memory_backend.get_by_token("tok_x") is None

    def test_separate_instances_do_not_share_state(self):
        """Test each backend owns its own storage."""
        assert MemoryBackend()._responses is not MemoryBackend()._responses
