"""
Recommendation Service - Gemini with a strict JSON output schema

Turns a user's favorite titles and optional notes into 8-10 media
recommendations and records each request/response pair in the history store.

Architecture:
- Pattern: Single-shot structured LLM call (one model call, one store write)
- Model: injected GenerativeModel (Gemini in production, see gemini_client.py)
- Store: injected HistoryStore (Supabase in production, see history_store.py)
- Output: JSON constrained by RECOMMENDATION_OUTPUT_SCHEMA, parsed here

Failure behavior:
- Validation errors are raised before the model is called
- Missing, non-string, or malformed model output raises
  RecommendationGenerationError and nothing is written
- No retries and no repair of malformed JSON
- A failed store write after a successful model call is logged with its
  traceback and the recommendations are still returned to the caller
"""

import json
import logging
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from media_recommender.agents.recommendation.prompts import (
    RECOMMENDATION_SYSTEM_PROMPT,
    build_recommendation_user_prompt,
)
from media_recommender.agents.recommendation.schemas import RECOMMENDATION_OUTPUT_SCHEMA
from media_recommender.schemas.recommendations import (
    MEDIA_TYPE_FILTERS,
    NewRecommendationSession,
    Recommendation,
    RecommendationSession,
)
from media_recommender.services.gemini_client import GenerativeModel
from media_recommender.services.history_store import HistoryStore

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Failed to generate recommendations"


class RecommendationServiceError(Exception):
    """Base class for errors surfaced to the caller as a single message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecommendationValidationError(RecommendationServiceError):
    """The request cannot be sent to the model as given."""


class RecommendationGenerationError(RecommendationServiceError):
    """The model call failed or returned unusable content."""


def _clean_optional(value: Optional[str]) -> Optional[str]:
    """Blank notes are stored and prompted as absent."""
    if value is None or not value.strip():
        return None
    return value


def _validate_request(favorite_media: Sequence[str], media_types: Sequence[str]) -> None:
    if not favorite_media or not any(item.strip() for item in favorite_media):
        raise RecommendationValidationError("Please add at least one favorite")

    if not media_types:
        raise RecommendationValidationError("Please select at least one media type")

    unknown = [value for value in media_types if value not in MEDIA_TYPE_FILTERS]
    if unknown:
        raise RecommendationValidationError(
            f"Unsupported media type(s): {', '.join(unknown)}"
        )


def parse_model_content(content: Any) -> List[Recommendation]:
    """
    Parse the model's textual content into recommendations.

    Raises:
        RecommendationGenerationError: If content is missing, not a string,
            not valid JSON, or not shaped like the output schema
    """
    if not content or not isinstance(content, str):
        logger.error(f"Model returned no usable content (type={type(content).__name__})")
        raise RecommendationGenerationError(GENERATION_FAILED_MESSAGE)

    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON response: {e}")
        logger.debug(f"Raw content preview: {content[:200]}")
        raise RecommendationGenerationError(GENERATION_FAILED_MESSAGE) from e

    if not isinstance(payload, dict) or not isinstance(payload.get("recommendations"), list):
        logger.error("Model response is missing the 'recommendations' array")
        raise RecommendationGenerationError(GENERATION_FAILED_MESSAGE)

    try:
        return [Recommendation.model_validate(item) for item in payload["recommendations"]]
    except ValidationError as e:
        logger.error(f"Model returned recommendations outside the schema: {e.error_count()} errors")
        raise RecommendationGenerationError(GENERATION_FAILED_MESSAGE) from e


async def generate_recommendations(
    model: GenerativeModel,
    store: HistoryStore,
    user_id: int,
    favorite_media: Sequence[str],
    media_types: Sequence[str],
    themes: Optional[str] = None,
    plots: Optional[str] = None,
    genres: Optional[str] = None,
) -> List[Recommendation]:
    """
    Generate media recommendations and record the session.

    This function:
    1. Validates favorites and media types (no model call on failure)
    2. Builds the user prompt
    3. Calls the model once with the strict output schema
    4. Parses the content into Recommendation models
    5. Writes one session row to the history store
    6. Returns the parsed recommendations

    Args:
        model: GenerativeModel used for the single completion
        store: HistoryStore receiving the session
        user_id: Owning app_user.id (from the authenticated caller)
        favorite_media: Favorite titles, order preserved
        media_types: Requested media-type filter values
        themes: Optional themes note
        plots: Optional plot preferences note
        genres: Optional genres note

    Returns:
        The recommendations the model produced

    Raises:
        RecommendationValidationError: Empty favorites or media types
        RecommendationGenerationError: Model failure or unusable output
    """
    _validate_request(favorite_media, media_types)

    themes = _clean_optional(themes)
    plots = _clean_optional(plots)
    genres = _clean_optional(genres)

    logger.info(
        f"generate_recommendations called for user_id={user_id}: "
        f"favorites={len(favorite_media)}, media_types={list(media_types)}"
    )

    user_prompt = build_recommendation_user_prompt(
        favorite_media=favorite_media,
        media_types=media_types,
        themes=themes,
        plots=plots,
        genres=genres,
    )

    try:
        content = await model.complete(
            RECOMMENDATION_SYSTEM_PROMPT,
            user_prompt,
            RECOMMENDATION_OUTPUT_SCHEMA,
        )
    except Exception as e:
        logger.error(f"Error calling generative model: {e}", exc_info=True)
        raise RecommendationGenerationError(GENERATION_FAILED_MESSAGE) from e

    recommendations = parse_model_content(content)
    logger.info(f"Model returned {len(recommendations)} recommendations for user_id={user_id}")

    record = NewRecommendationSession(
        user_id=user_id,
        favorite_media=list(favorite_media),
        themes=themes,
        plots=plots,
        genres=genres,
        media_types=list(media_types),
        results=recommendations,
    )

    try:
        await store.create_session(record)
    except Exception as e:
        # The caller still gets the recommendations; the session is lost
        logger.error(
            f"Failed to store recommendation session for user_id={user_id}: {e}",
            exc_info=True,
        )

    return recommendations


async def get_recommendation_history(
    store: HistoryStore,
    user_id: int,
) -> List[RecommendationSession]:
    """
    Return every recommendation session owned by user_id.

    Blob columns are already decoded by the store. A user with no sessions
    gets an empty list.
    """
    logger.info(f"get_recommendation_history called for user_id={user_id}")

    sessions = await store.list_sessions_for_user(user_id)

    logger.info(f"Returning {len(sessions)} sessions for user_id={user_id}")
    return sessions
