"""
Tests for the Supabase-backed recommendation history store.

The Supabase client is a MagicMock; these tests check the rows written
to and read from the recommendation_session table.
"""

import json

import pytest
from unittest.mock import MagicMock

from media_recommender.schemas.recommendations import NewRecommendationSession, Recommendation
from media_recommender.services.history_store import (
    SESSION_TABLE,
    HistoryStoreError,
    SupabaseHistoryStore,
    decode_session_row,
    encode_session_row,
)


@pytest.fixture
def new_session(sample_recommendations):
    return NewRecommendationSession(
        user_id=7,
        favorite_media=["Amélie", "The Matrix"],
        themes="identity",
        plots=None,
        genres=None,
        media_types=["movies", "books"],
        results=[Recommendation.model_validate(item) for item in sample_recommendations[:2]],
    )


@pytest.fixture
def stored_row(sample_recommendations):
    return {
        "id": 11,
        "user_id": 7,
        "favorite_media": json.dumps(["The Matrix"]),
        "themes": None,
        "plots": "twists",
        "genres": None,
        "media_types": json.dumps(["all"]),
        "results": json.dumps(sample_recommendations),
        "created_at": "2026-10-19T12:00:00+00:00",
    }


def _select_chain(supabase_client):
    return supabase_client.table.return_value.select.return_value.eq.return_value.order.return_value


class TestRowEncoding:
    """Tests for encode_session_row / decode_session_row."""

    def test_blob_columns_are_json_text(self, new_session):
        row = encode_session_row(new_session)

        assert row["user_id"] == 7
        assert json.loads(row["favorite_media"]) == ["Amélie", "The Matrix"]
        assert json.loads(row["media_types"]) == ["movies", "books"]
        assert json.loads(row["results"])[0]["creator"] == "Denis Villeneuve"
        assert row["themes"] == "identity"
        assert row["plots"] is None
        assert "id" not in row
        assert "created_at" not in row

    def test_non_ascii_kept_readable(self, new_session):
        row = encode_session_row(new_session)
        assert "Amélie" in row["favorite_media"]

    def test_decode_text_columns(self, stored_row):
        session = decode_session_row(stored_row)

        assert session.id == 11
        assert session.favorite_media == ["The Matrix"]
        assert session.media_types == ["all"]
        assert session.plots == "twists"
        assert len(session.results) == 4
        assert session.results[2].type == "tv_show"

    def test_decode_already_decoded_columns(self, stored_row, sample_recommendations):
        stored_row["favorite_media"] = ["The Matrix"]
        stored_row["results"] = sample_recommendations

        session = decode_session_row(stored_row)

        assert session.favorite_media == ["The Matrix"]
        assert len(session.results) == 4

    def test_decode_corrupt_blob_raises(self, stored_row):
        stored_row["results"] = "[{"
        with pytest.raises(json.JSONDecodeError):
            decode_session_row(stored_row)


class TestSupabaseHistoryStore:
    """Tests for SupabaseHistoryStore."""

    @pytest.mark.asyncio
    async def test_create_session_inserts_encoded_row(self, supabase_client, new_session):
        supabase_client.table.return_value.insert.return_value.execute.return_value = MagicMock(
            data=[{"id": 1}]
        )

        await SupabaseHistoryStore(supabase_client).create_session(new_session)

        supabase_client.table.assert_called_with(SESSION_TABLE)
        inserted = supabase_client.table.return_value.insert.call_args[0][0]
        assert inserted == encode_session_row(new_session)

    @pytest.mark.asyncio
    async def test_create_session_without_returned_row_raises(self, supabase_client, new_session):
        supabase_client.table.return_value.insert.return_value.execute.return_value = MagicMock(data=[])

        with pytest.raises(HistoryStoreError):
            await SupabaseHistoryStore(supabase_client).create_session(new_session)

    @pytest.mark.asyncio
    async def test_list_filters_and_orders(self, supabase_client, stored_row):
        _select_chain(supabase_client).execute.return_value = MagicMock(data=[stored_row])

        sessions = await SupabaseHistoryStore(supabase_client).list_sessions_for_user(7)

        supabase_client.table.assert_called_with(SESSION_TABLE)
        supabase_client.table.return_value.select.return_value.eq.assert_called_with("user_id", 7)
        supabase_client.table.return_value.select.return_value.eq.return_value.order.assert_called_with(
            "created_at", desc=True
        )
        assert [s.id for s in sessions] == [11]

    @pytest.mark.asyncio
    async def test_list_drops_rows_owned_by_others(self, supabase_client, stored_row):
        foreign = dict(stored_row, id=12, user_id=8)
        _select_chain(supabase_client).execute.return_value = MagicMock(data=[foreign, stored_row])

        sessions = await SupabaseHistoryStore(supabase_client).list_sessions_for_user(7)

        assert [s.id for s in sessions] == [11]

    @pytest.mark.asyncio
    async def test_list_empty(self, supabase_client):
        _select_chain(supabase_client).execute.return_value = MagicMock(data=[])

        assert await SupabaseHistoryStore(supabase_client).list_sessions_for_user(7) == []
