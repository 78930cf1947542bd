"""
Supabase client factory with RLS enforcement.

This module provides authenticated Supabase clients that automatically
enforce Row Level Security (RLS) by setting the user's JWT token.

CRITICAL SECURITY RULES:
1. NEVER use the service_role key for user operations
2. ALWAYS use the user's JWT token from Supabase Auth
3. RLS policies scope app_user and recommendation_session rows to the
   caller's auth.uid(); the service layer filters by owner on top of that
4. The client MUST be created per-request with the user's token
"""

import logging

from media_recommender.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def get_supabase_client(access_token: str) -> Client:
    """
    Create an authenticated Supabase client for a specific user.

    This client respects Row Level Security (RLS) policies because it uses
    the user's JWT access token from Supabase Auth.

    Args:
        access_token: The user's JWT access token from Supabase Auth.
                     This is the token verified in media_recommender/auth/dependencies.py.

    Returns:
        An authenticated Supabase client that enforces RLS.

    Example:
        >>> client = get_supabase_client(auth_user.access_token)
        >>> result = client.table("recommendation_session").select("*").execute()
    """
    # Create client with publishable key (respects RLS)
    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )

    # PostgREST requests carry the user's JWT so auth.uid() resolves in RLS policies
    client.postgrest.auth(access_token)

    logger.debug(
        "Created authenticated Supabase client with user token "
        "(RLS enforced)"
    )

    return client
