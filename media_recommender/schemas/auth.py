"""
Pydantic schemas for authentication endpoints.

These models define the strict request/response contracts for auth endpoints.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from media_recommender.schemas.recommendations import CamelModel

UserRole = Literal["user", "admin"]


class UserResponse(CamelModel):
    """
    Response for /auth/me and /auth/sign-in - the caller's app_user record.

    Used on app boot to hydrate global session state and confirm token validity.
    """
    id: int = Field(..., description="app_user surrogate key (owner of recommendation sessions)")
    open_id: str = Field(..., description="External identity (JWT 'sub' claim)")
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Email address, if the provider shares it")
    login_method: Optional[str] = Field(
        None,
        description="Sign-in provider",
        examples=["google", "email", "github"]
    )
    role: UserRole = Field("user", description="Authorization role")
    created_at: datetime = Field(..., description="When the user first signed in")
    updated_at: datetime = Field(..., description="Last profile update")
    last_signed_in: datetime = Field(..., description="Last successful sign-in")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": 1,
                    "openId": "38f7d540-23fa-497a-8df2-3ab9cbe13da5",
                    "name": "Ada Lovelace",
                    "email": "ada@example.com",
                    "loginMethod": "google",
                    "role": "user",
                    "createdAt": "2026-01-05T10:00:00Z",
                    "updatedAt": "2026-01-05T10:00:00Z",
                    "lastSignedIn": "2026-01-05T10:00:00Z"
                }
            ]
        }
    }
