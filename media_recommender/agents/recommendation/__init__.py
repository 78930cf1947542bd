"""
Recommendation System - Structured single-shot LLM call

Prompt templates and the strict output schema for the Gemini-based media
recommender.

The service layer is in:
- media_recommender/services/recommendation_service.py

The model client is in:
- media_recommender/services/gemini_client.py
"""

from media_recommender.agents.recommendation.prompts import (
    ALL_MEDIA_TYPES_PHRASE,
    RECOMMENDATION_SYSTEM_PROMPT,
    build_recommendation_user_prompt,
    describe_media_types,
)
from media_recommender.agents.recommendation.schemas import (
    RECOMMENDATION_OUTPUT_SCHEMA,
)

__all__ = [
    "ALL_MEDIA_TYPES_PHRASE",
    "RECOMMENDATION_SYSTEM_PROMPT",
    "RECOMMENDATION_OUTPUT_SCHEMA",
    "build_recommendation_user_prompt",
    "describe_media_types",
]
