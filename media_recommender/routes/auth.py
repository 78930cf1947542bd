"""
Auth API endpoints.

Provides endpoints for authentication-related operations:
- POST /auth/sign-in - Record a successful sign-in (upsert app_user)
- GET /auth/me - Get the caller's app_user record

All endpoints require valid Bearer token authentication. Token issuance,
cookies, and logout are handled by Supabase Auth on the client.
"""

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from media_recommender.auth.dependencies import AuthenticatedUser, get_authenticated_user
from media_recommender.db.client import get_supabase_client
from media_recommender.schemas.auth import UserResponse
from media_recommender.services.user_service import get_user_by_open_id, upsert_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _to_user_response(user: Dict[str, Any]) -> UserResponse:
    return UserResponse(
        id=user["id"],
        open_id=user["open_id"],
        name=user.get("name"),
        email=user.get("email"),
        login_method=user.get("login_method"),
        role=user.get("role") or "user",
        created_at=user["created_at"],
        updated_at=user["updated_at"],
        last_signed_in=user["last_signed_in"],
    )


@router.post(
    "/sign-in",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Record a sign-in",
    description="""
    Called by the client right after Supabase Auth completes a sign-in.

    This endpoint:
    - Validates the bearer token
    - Creates the app_user row on first sign-in, updates it afterwards
    - Stamps last_signed_in
    - Leaves the role to the database (owner account becomes admin)
    """
)
async def sign_in(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> UserResponse:
    """Upsert the caller's app_user row from token claims."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        user = await upsert_user(
            supabase_client,
            open_id=auth_user.user_id,
            name=auth_user.name,
            email=auth_user.email,
            login_method=auth_user.login_method,
        )
    except Exception as e:
        logger.error(f"Error in sign_in for open_id={auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "sign_in_failed", "details": "Failed to record sign-in"}
        )

    return _to_user_response(user)


@router.get(
    "/me",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get authenticated user identity",
    description="""
    Get the authenticated user's app_user record for session hydration.

    A valid token whose user has no app_user row yet gets one created.
    """
)
async def get_auth_me(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> UserResponse:
    """Get the authenticated user's identity."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        user = await get_user_by_open_id(supabase_client, auth_user.user_id)
        if user is None:
            user = await upsert_user(
                supabase_client,
                open_id=auth_user.user_id,
                name=auth_user.name,
                email=auth_user.email,
                login_method=auth_user.login_method,
            )
    except Exception as e:
        logger.error(f"Error in get_auth_me for open_id={auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "auth_me_failed", "details": "Failed to load user record"}
        )

    return _to_user_response(user)
