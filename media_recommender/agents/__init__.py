"""
AI components for the AI Media Recommender backend.

Recommendation System (single-shot structured LLM call)
- Uses Gemini with a strict JSON output schema
- NOT an ADK agent - uses the Google Gen AI SDK directly
- Prompts and schema: media_recommender/agents/recommendation/
- Orchestration: media_recommender/services/recommendation_service.py
"""

from media_recommender.agents.recommendation import (
    RECOMMENDATION_OUTPUT_SCHEMA,
    RECOMMENDATION_SYSTEM_PROMPT,
    build_recommendation_user_prompt,
)

__all__ = [
    "RECOMMENDATION_OUTPUT_SCHEMA",
    "RECOMMENDATION_SYSTEM_PROMPT",
    "build_recommendation_user_prompt",
]
