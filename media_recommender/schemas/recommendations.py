"""
Pydantic schemas for the recommendation endpoints.

These models define the strict request/response contracts between the
preference form, the recommendation service, and the history store.

Two enums are intentionally kept apart:
- MediaTypeFilter is what the user selects (plural categories plus the
  "all" wildcard).
- RecommendationType is how the model classifies each returned item.

JSON bodies use camelCase field names (favoriteMedia, mediaTypes, ...).
Snake_case names are accepted on input as well.
"""

from datetime import datetime
from typing import List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MediaTypeFilter = Literal["books", "movies", "songs", "tv_shows", "all"]
RecommendationType = Literal["book", "movie", "song", "tv_show"]

MEDIA_TYPE_FILTERS: tuple[str, ...] = get_args(MediaTypeFilter)
RECOMMENDATION_TYPES: tuple[str, ...] = get_args(RecommendationType)

ALL_MEDIA_TYPES: MediaTypeFilter = "all"


class CamelModel(BaseModel):
    """Base model that serializes field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# REQUEST MODELS
# ============================================================================

class GenerateRecommendationsRequest(CamelModel):
    """
    Request to generate recommendations from the user's preferences.

    Sent by the preference form when the user clicks "Get recommendations".
    The service re-checks the two list constraints, so a caller that skips
    this model still cannot trigger a model call with an empty list.
    """
    favorite_media: List[str] = Field(
        ...,
        description="Favorite titles (free text), in the order the user added them",
        min_length=1,
        examples=[["The Matrix", "Inception", "Interstellar"]]
    )
    themes: Optional[str] = Field(
        None,
        description="Themes the user enjoys",
        max_length=2000,
        examples=["science fiction, mind-bending"]
    )
    plots: Optional[str] = Field(
        None,
        description="Plot preferences",
        max_length=2000,
        examples=["complex narratives"]
    )
    genres: Optional[str] = Field(
        None,
        description="Preferred genres",
        max_length=2000,
        examples=["sci-fi, thriller"]
    )
    media_types: List[MediaTypeFilter] = Field(
        ...,
        description="Requested output categories, or ['all']",
        min_length=1,
        examples=[["movies"], ["all"], ["books", "tv_shows"]]
    )


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class Recommendation(CamelModel):
    """
    A single recommended title, as returned by the generative model.

    Stored serialized inside its parent session, never queried on its own.
    """
    model_config = ConfigDict(extra="forbid")

    title: str = Field(
        ...,
        description="Title of the media",
        min_length=1,
        examples=["Blade Runner 2049"]
    )
    type: RecommendationType = Field(..., description="Concrete media type of this item")
    creator: str = Field(
        ...,
        description="Author, director, or artist",
        min_length=1,
        examples=["Denis Villeneuve"]
    )
    year: str = Field(
        ...,
        description="Release year as free text (may be a range or 'unknown')",
        examples=["2017", "2008-2013", "unknown"]
    )
    description: str = Field(
        ...,
        description="2-3 sentences on the content and why it matches the user's preferences",
        min_length=1,
    )


class RecommendationSession(CamelModel):
    """
    One persisted generate request and its results, as shown on the history page.
    """
    id: int = Field(..., description="Session surrogate key")
    user_id: int = Field(..., description="Owning app_user.id")
    favorite_media: List[str] = Field(..., description="Favorites the session was seeded with")
    themes: Optional[str] = Field(None, description="Themes note, if provided")
    plots: Optional[str] = Field(None, description="Plot preferences note, if provided")
    genres: Optional[str] = Field(None, description="Genres note, if provided")
    media_types: List[MediaTypeFilter] = Field(..., description="Requested categories")
    results: List[Recommendation] = Field(..., description="Recommendations the model returned")
    created_at: datetime = Field(..., description="When the session was stored")


class NewRecommendationSession(BaseModel):
    """
    A session about to be written to the history store.

    Internal only: the store assigns id and created_at.
    """
    user_id: int
    favorite_media: List[str]
    themes: Optional[str] = None
    plots: Optional[str] = None
    genres: Optional[str] = None
    media_types: List[MediaTypeFilter]
    results: List[Recommendation]
