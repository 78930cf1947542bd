"""
Tests for the Gemini-backed GenerativeModel.

genai.Client is patched out; no network calls are made.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from media_recommender.agents.recommendation.schemas import RECOMMENDATION_OUTPUT_SCHEMA
from media_recommender.services.gemini_client import GeminiGenerativeModel


@pytest.fixture
def mock_genai_client():
    with patch("media_recommender.services.gemini_client.genai.Client") as mock_cls:
        client = MagicMock()
        client.aio.models.generate_content = AsyncMock()
        mock_cls.return_value = client
        yield mock_cls, client


class TestGeminiGenerativeModel:

    @pytest.mark.asyncio
    async def test_structured_request(self, mock_genai_client):
        mock_cls, client = mock_genai_client
        client.aio.models.generate_content.return_value = MagicMock(
            candidates=[MagicMock()],
            text='{"recommendations": []}',
        )

        model = GeminiGenerativeModel(api_key="key", model="gemini-test", temperature=0.3)
        content = await model.complete("system", "user", RECOMMENDATION_OUTPUT_SCHEMA)

        assert content == '{"recommendations": []}'
        mock_cls.assert_called_once_with(api_key="key")

        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == "user"
        config = kwargs["config"]
        assert config.system_instruction == "system"
        assert config.temperature == 0.3
        assert config.response_mime_type == "application/json"
        assert config.response_json_schema == RECOMMENDATION_OUTPUT_SCHEMA

    @pytest.mark.asyncio
    async def test_no_candidates_returns_none(self, mock_genai_client):
        _, client = mock_genai_client
        client.aio.models.generate_content.return_value = MagicMock(candidates=[])

        model = GeminiGenerativeModel(api_key="key")

        assert await model.complete("system", "user", RECOMMENDATION_OUTPUT_SCHEMA) is None

    @pytest.mark.asyncio
    async def test_missing_api_key(self, mock_genai_client):
        mock_cls, _ = mock_genai_client
        model = GeminiGenerativeModel(api_key="")

        with pytest.raises(ValueError, match="GOOGLE_API_KEY"):
            await model.complete("system", "user", RECOMMENDATION_OUTPUT_SCHEMA)

        mock_cls.assert_not_called()

    def test_client_created_lazily_and_reused(self, mock_genai_client):
        mock_cls, _ = mock_genai_client
        model = GeminiGenerativeModel(api_key="key")

        mock_cls.assert_not_called()
        assert model._get_client() is model._get_client()
        mock_cls.assert_called_once()
