"""
Service layer for the AI Media Recommender backend.

Contains business logic orchestration that:
- Builds prompts and calls the generative model
- Validates and parses model output into Pydantic models
- Coordinates persistence (history store, app_user sync) under RLS

Services act as the glue between routes (HTTP layer) and the model/database.
"""

from .history_store import (
    HistoryStore,
    HistoryStoreError,
    SupabaseHistoryStore,
    decode_session_row,
    encode_session_row,
)
from .recommendation_service import (
    RecommendationGenerationError,
    RecommendationServiceError,
    RecommendationValidationError,
    generate_recommendations,
    get_recommendation_history,
)
from .user_service import get_user_by_open_id, upsert_user

__all__ = [
    "HistoryStore",
    "HistoryStoreError",
    "SupabaseHistoryStore",
    "encode_session_row",
    "decode_session_row",
    "RecommendationServiceError",
    "RecommendationValidationError",
    "RecommendationGenerationError",
    "generate_recommendations",
    "get_recommendation_history",
    "get_user_by_open_id",
    "upsert_user",
]
