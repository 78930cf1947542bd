"""
Recommendation history store.

Append-only persistence for recommendation sessions in the
recommendation_session table. Sessions are immutable: this module exposes
an insert and an owner-scoped read, nothing else.

Storage layout: favorite_media, media_types and results are JSON text in
otherwise relational columns. Encoding happens in encode_session_row and
decoding in decode_session_row; nothing outside this module sees the
serialized form.
"""

import json
import logging
from typing import Any, Dict, List, Protocol, cast

from supabase import Client

from media_recommender.schemas.recommendations import (
    NewRecommendationSession,
    RecommendationSession,
)

logger = logging.getLogger(__name__)

SESSION_TABLE = "recommendation_session"


class HistoryStoreError(Exception):
    """Raised when the backing table rejects or loses a write."""


class HistoryStore(Protocol):
    """Persistence interface the recommendation service depends on."""

    async def create_session(self, record: NewRecommendationSession) -> None:
        ...

    async def list_sessions_for_user(self, user_id: int) -> List[RecommendationSession]:
        ...


def _encode_blob(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _decode_blob(value: Any) -> Any:
    # jsonb columns come back already decoded
    if isinstance(value, (str, bytes, bytearray)):
        return json.loads(value)
    return value


def encode_session_row(record: NewRecommendationSession) -> Dict[str, Any]:
    """
    Map a new session to a recommendation_session row.

    id and created_at are left to the database defaults.
    """
    return {
        "user_id": record.user_id,
        "favorite_media": _encode_blob(record.favorite_media),
        "themes": record.themes,
        "plots": record.plots,
        "genres": record.genres,
        "media_types": _encode_blob(record.media_types),
        "results": _encode_blob([item.model_dump() for item in record.results]),
    }


def decode_session_row(row: Dict[str, Any]) -> RecommendationSession:
    """
    Map a recommendation_session row back to a RecommendationSession.

    Raises:
        json.JSONDecodeError: If a blob column does not hold valid JSON
        pydantic.ValidationError: If the decoded values don't fit the model
    """
    return RecommendationSession.model_validate({
        "id": row["id"],
        "user_id": row["user_id"],
        "favorite_media": _decode_blob(row["favorite_media"]),
        "themes": row.get("themes"),
        "plots": row.get("plots"),
        "genres": row.get("genres"),
        "media_types": _decode_blob(row["media_types"]),
        "results": _decode_blob(row["results"]),
        "created_at": row["created_at"],
    })


class SupabaseHistoryStore:
    """
    HistoryStore backed by a Supabase table.

    The client must be an authenticated per-request client (see
    media_recommender.db.client.get_supabase_client) so RLS applies.
    """

    def __init__(self, supabase_client: Client):
        self.supabase_client = supabase_client

    async def create_session(self, record: NewRecommendationSession) -> None:
        """
        Insert a new immutable session row.

        Raises:
            HistoryStoreError: If the insert returns no row
        """
        row = encode_session_row(record)

        logger.info(
            f"Storing recommendation session for user_id={record.user_id}: "
            f"favorites={len(record.favorite_media)}, results={len(record.results)}"
        )

        result = self.supabase_client.table(SESSION_TABLE).insert(row).execute()

        if not result.data or len(result.data) == 0:
            raise HistoryStoreError("Failed to create recommendation session: no data returned")

        created = cast(Dict[str, Any], result.data[0])
        logger.info(f"Recommendation session {created.get('id')} stored for user_id={record.user_id}")

    async def list_sessions_for_user(self, user_id: int) -> List[RecommendationSession]:
        """
        Fetch every session owned by user_id, newest first.

        Security:
            - Filtered by user_id in the query and again on decode
            - RLS additionally restricts rows to the token's owner
        """
        logger.debug(f"Fetching recommendation sessions for user_id={user_id}")

        result = (
            self.supabase_client.table(SESSION_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )

        rows = cast(List[Dict[str, Any]], result.data or [])

        sessions: List[RecommendationSession] = []
        for row in rows:
            if row.get("user_id") != user_id:
                logger.error(
                    f"Dropping session {row.get('id')} owned by another user "
                    f"from history of user_id={user_id}"
                )
                continue
            sessions.append(decode_session_row(row))

        logger.info(f"Found {len(sessions)} recommendation sessions for user_id={user_id}")

        return sessions
