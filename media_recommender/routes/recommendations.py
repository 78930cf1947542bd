"""
FastAPI routes for recommendation endpoints.

All endpoints require authentication via Supabase Auth.

Endpoints:
- POST /recommendations/generate: Generate recommendations and record the session
- GET /recommendations/history: List the caller's past sessions
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status

from media_recommender.auth.dependencies import CurrentUser, get_current_user
from media_recommender.db.client import get_supabase_client
from media_recommender.schemas.recommendations import (
    GenerateRecommendationsRequest,
    Recommendation,
    RecommendationSession,
)
from media_recommender.services.gemini_client import GenerativeModel, get_generative_model
from media_recommender.services.history_store import HistoryStore, SupabaseHistoryStore
from media_recommender.services.recommendation_service import (
    RecommendationGenerationError,
    RecommendationValidationError,
    generate_recommendations,
    get_recommendation_history,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/recommendations",
    tags=["recommendations"]
)


def get_history_store(
    current_user: Annotated[CurrentUser, Depends(get_current_user)]
) -> HistoryStore:
    """History store bound to the caller's token (RLS enforced)."""
    return SupabaseHistoryStore(get_supabase_client(current_user.access_token))


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post(
    "/generate",
    response_model=List[Recommendation],
    status_code=status.HTTP_200_OK,
    summary="Generate media recommendations",
    description="""
    Generates 8-10 recommendations from the user's favorite titles and
    optional theme/plot/genre notes, restricted to the requested media types.

    **Authentication:** Required (Bearer token)

    **Frontend Flow:**
    1. User adds favorites and optional notes, picks media types
    2. User clicks "Get recommendations"
    3. POST /recommendations/generate
    4. Display the returned list grouped by type

    **Errors:**
    - 400 validation_error: empty favorites or media types
    - 422: request body does not match the schema
    - 502 generation_failed: the model returned nothing usable

    Every successful call stores one session, visible in GET /recommendations/history.
    """
)
async def generate_recommendations_endpoint(
    request: GenerateRecommendationsRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    model: Annotated[GenerativeModel, Depends(get_generative_model)],
    store: Annotated[HistoryStore, Depends(get_history_store)],
) -> List[Recommendation]:
    """Generate recommendations for the authenticated user."""
    logger.info(
        f"POST /recommendations/generate called by user_id={current_user.id}, "
        f"favorites={len(request.favorite_media)}, media_types={request.media_types}"
    )

    try:
        recommendations = await generate_recommendations(
            model=model,
            store=store,
            user_id=current_user.id,
            favorite_media=request.favorite_media,
            media_types=request.media_types,
            themes=request.themes,
            plots=request.plots,
            genres=request.genres,
        )
    except RecommendationValidationError as e:
        logger.warning(f"Rejected generate request for user_id={current_user.id}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "validation_error", "details": e.message}
        )
    except RecommendationGenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "generation_failed", "details": e.message}
        )

    logger.info(f"Returning {len(recommendations)} recommendations to user_id={current_user.id}")
    return recommendations


@router.get(
    "/history",
    response_model=List[RecommendationSession],
    status_code=status.HTTP_200_OK,
    summary="List recommendation history",
    description="""
    Returns every recommendation session owned by the authenticated user,
    newest first, with favorites, media types, and results decoded.

    **Authentication:** Required (Bearer token)

    Security:
    - Only the caller's own sessions are returned
    - A user with no sessions gets an empty list
    """
)
async def recommendation_history_endpoint(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[HistoryStore, Depends(get_history_store)],
) -> List[RecommendationSession]:
    """List past sessions for the authenticated user."""
    logger.info(f"GET /recommendations/history called by user_id={current_user.id}")

    try:
        return await get_recommendation_history(store=store, user_id=current_user.id)
    except Exception as e:
        logger.error(f"Failed to load history for user_id={current_user.id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to retrieve recommendation history"
            }
        )
