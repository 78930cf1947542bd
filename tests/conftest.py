"""
Pytest configuration for media recommender backend tests.

Sets up test environment and global fixtures.
"""
import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
from unittest.mock import MagicMock

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")

from media_recommender.schemas.recommendations import (  # noqa: E402
    NewRecommendationSession,
    RecommendationSession,
)


class FakeGenerativeModel:
    """
    Stand-in for GeminiGenerativeModel.

    Returns `content` from every call (or raises `error`) and records the
    prompts it was given.
    """

    def __init__(self, content: Any = None, error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def complete(self, system_prompt: str, user_prompt: str, response_schema: Dict[str, Any]) -> Any:
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "response_schema": response_schema,
        })
        if self.error is not None:
            raise self.error
        return self.content


class InMemoryHistoryStore:
    """HistoryStore kept in a list; `fail_writes` makes create_session raise."""

    def __init__(self, fail_writes: bool = False):
        self.sessions: List[RecommendationSession] = []
        self.fail_writes = fail_writes

    async def create_session(self, record: NewRecommendationSession) -> None:
        if self.fail_writes:
            raise RuntimeError("database unavailable")
        self.sessions.append(RecommendationSession(
            id=len(self.sessions) + 1,
            created_at=datetime(2026, 10, 19, 12, len(self.sessions), tzinfo=timezone.utc),
            **record.model_dump(),
        ))

    async def list_sessions_for_user(self, user_id: int) -> List[RecommendationSession]:
        owned = [s for s in self.sessions if s.user_id == user_id]
        return sorted(owned, key=lambda s: s.created_at, reverse=True)


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client for testing table queries.
    Returns a MagicMock that simulates Supabase client behavior.
    """
    mock_client = MagicMock()
    return mock_client


@pytest.fixture
def sample_recommendations() -> List[Dict[str, str]]:
    """Model-shaped recommendation items, one per media type."""
    return [
        {
            "title": "Blade Runner 2049",
            "type": "movie",
            "creator": "Denis Villeneuve",
            "year": "2017",
            "description": "A replicant hunter uncovers a buried secret. Shares the Matrix's questions about what is real.",
        },
        {
            "title": "Neuromancer",
            "type": "book",
            "creator": "William Gibson",
            "year": "1984",
            "description": "The cyberpunk novel that shaped the genre. A hacker is hired for one last job.",
        },
        {
            "title": "Black Mirror",
            "type": "tv_show",
            "creator": "Charlie Brooker",
            "year": "2011-2023",
            "description": "Anthology series about technology gone wrong.",
        },
        {
            "title": "Clubbed to Death",
            "type": "song",
            "creator": "Rob Dougan",
            "year": "1995",
            "description": "The track behind the Matrix's lobby scene.",
        },
    ]


@pytest.fixture
def movie_recommendations(sample_recommendations) -> List[Dict[str, str]]:
    return [item for item in sample_recommendations if item["type"] == "movie"]


@pytest.fixture
def model_content(sample_recommendations) -> str:
    """Valid JSON text as the model would return it."""
    return json.dumps({"recommendations": sample_recommendations})


@pytest.fixture
def fake_model(model_content) -> FakeGenerativeModel:
    return FakeGenerativeModel(content=model_content)


@pytest.fixture
def history_store() -> InMemoryHistoryStore:
    return InMemoryHistoryStore()


@pytest.fixture
def make_model():
    """Factory for FakeGenerativeModel with custom content or error."""
    return FakeGenerativeModel


@pytest.fixture
def make_store():
    """Factory for InMemoryHistoryStore."""
    return InMemoryHistoryStore
