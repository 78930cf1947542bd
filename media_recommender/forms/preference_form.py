"""
Preference form state.

Draft state behind the "Your Preferences" form and the helpers used to
render results. The rules here must stay consistent with the input checks
in the recommendation service:

- Favorites are trimmed and deduplicated as they are added.
- The media-type selection starts as ["all"]. Choosing "all" clears every
  other choice; choosing a specific type drops "all"; deselecting the last
  specific type falls back to ["all"]. The selection is therefore never empty.
- Submitting with no favorites is blocked with a user-visible message.
"""

from typing import Dict, List, Optional
from urllib.parse import quote

from media_recommender.schemas.recommendations import (
    ALL_MEDIA_TYPES,
    MEDIA_TYPE_FILTERS,
    RECOMMENDATION_TYPES,
    GenerateRecommendationsRequest,
    MediaTypeFilter,
    Recommendation,
)

NO_FAVORITES_MESSAGE = "Please add at least one favorite media item"
FALLBACK_ERROR_MESSAGE = "Failed to generate recommendations"

MEDIA_TYPE_LABELS: Dict[str, str] = {
    "book": "Book",
    "movie": "Movie",
    "song": "Song",
    "tv_show": "TV Show",
}


class PreferenceFormError(ValueError):
    """Raised when the draft cannot be submitted."""


class PreferenceForm:
    """Local draft of a recommendation request."""

    def __init__(self) -> None:
        self.favorite_media: List[str] = []
        self.themes: str = ""
        self.plots: str = ""
        self.genres: str = ""
        self.selected_types: List[MediaTypeFilter] = [ALL_MEDIA_TYPES]

    def add_favorite(self, title: str) -> bool:
        """Add a favorite; returns False for blank or already-listed titles."""
        title = title.strip()
        if not title or title in self.favorite_media:
            return False
        self.favorite_media.append(title)
        return True

    def remove_favorite(self, title: str) -> None:
        self.favorite_media = [item for item in self.favorite_media if item != title]

    def toggle_media_type(self, media_type: MediaTypeFilter) -> List[MediaTypeFilter]:
        """
        Apply a click on a media-type checkbox and return the new selection.

        Raises:
            PreferenceFormError: For values outside the filter enum
        """
        if media_type not in MEDIA_TYPE_FILTERS:
            raise PreferenceFormError(f"Unknown media type: {media_type}")

        if media_type == ALL_MEDIA_TYPES:
            self.selected_types = [ALL_MEDIA_TYPES]
            return self.selected_types

        specific = [t for t in self.selected_types if t != ALL_MEDIA_TYPES]
        if media_type in specific:
            specific = [t for t in specific if t != media_type]
            self.selected_types = specific or [ALL_MEDIA_TYPES]
        else:
            self.selected_types = specific + [media_type]

        return self.selected_types

    def select_media_types(self, media_types: List[str]) -> List[MediaTypeFilter]:
        """
        Replace the selection with a whole list, e.g. from repeated CLI flags.

        Duplicates are dropped in order. "all" anywhere in the list, or an
        empty list, selects ["all"].

        Raises:
            PreferenceFormError: For values outside the filter enum
        """
        unknown = [t for t in media_types if t not in MEDIA_TYPE_FILTERS]
        if unknown:
            raise PreferenceFormError(f"Unknown media type: {', '.join(unknown)}")

        if not media_types or ALL_MEDIA_TYPES in media_types:
            self.selected_types = [ALL_MEDIA_TYPES]
        else:
            self.selected_types = list(dict.fromkeys(media_types))  # type: ignore[arg-type]

        return self.selected_types

    def build_request(self) -> GenerateRecommendationsRequest:
        """
        Build the generate request from the draft.

        Raises:
            PreferenceFormError: If no favorites were added
        """
        if not self.favorite_media:
            raise PreferenceFormError(NO_FAVORITES_MESSAGE)

        return GenerateRecommendationsRequest(
            favorite_media=list(self.favorite_media),
            themes=self.themes.strip() or None,
            plots=self.plots.strip() or None,
            genres=self.genres.strip() or None,
            media_types=list(self.selected_types),
        )


def group_recommendations_by_type(
    recommendations: List[Recommendation],
) -> Dict[str, List[Recommendation]]:
    """
    Group results for display, in book/movie/song/tv_show order.

    Empty groups are left out; order within a group is the model's order.
    """
    groups: Dict[str, List[Recommendation]] = {t: [] for t in RECOMMENDATION_TYPES}
    for recommendation in recommendations:
        groups[recommendation.type].append(recommendation)
    return {t: items for t, items in groups.items() if items}


def media_type_label(recommendation_type: str) -> str:
    """Display label for a recommendation's type; unknown types pass through."""
    return MEDIA_TYPE_LABELS.get(recommendation_type, recommendation_type)


def media_filter_label(media_type: str) -> str:
    """Badge text for a requested media type on the history page."""
    if media_type == ALL_MEDIA_TYPES:
        return "All Types"
    return media_type


def web_search_url(recommendation: Recommendation) -> str:
    """'Search on Google' link for a recommendation."""
    query = f"{recommendation.title} {recommendation.creator}"
    return f"https://www.google.com/search?q={quote(query, safe='')}"


def error_message(error: Optional[BaseException]) -> str:
    """The message shown to the user for a failed submit, verbatim when there is one."""
    if error is None:
        return FALLBACK_ERROR_MESSAGE
    message = getattr(error, "message", None) or str(error)
    return message or FALLBACK_ERROR_MESSAGE
