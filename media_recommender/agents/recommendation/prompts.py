"""
Recommendation Prompt Templates

Contains the system prompt and user prompt builder for the Recommendation Service.

Architecture:
- Pattern: Single-shot structured LLM call (no tools, no retries)
- Model: Gemini 2.5 Flash (configurable via GEMINI_MODEL)
- Output: JSON constrained by RECOMMENDATION_OUTPUT_SCHEMA (see schemas.py)

The system prompt fixes the persona and the JSON-only contract. The user
prompt carries the favorites, the optional notes, and the requested
media types.
"""

from typing import List, Optional, Sequence

# =============================================================================
# SYSTEM PROMPT
# =============================================================================

RECOMMENDATION_SYSTEM_PROMPT = (
    "You are a helpful media recommendation assistant. "
    "Always respond with valid JSON."
)

ALL_MEDIA_TYPES_PHRASE = "all types of media (books, movies, songs, and TV shows)"

RECOMMENDATION_COUNT_RANGE = "8-10"

OUTPUT_FORMAT_EXAMPLE = """{
  "recommendations": [
    {
      "title": "Title of the media",
      "type": "book" | "movie" | "song" | "tv_show",
      "creator": "Author/Director/Artist name",
      "year": "Release year (if known)",
      "description": "2-3 sentence description explaining the plot/content and why it matches the user's preferences"
    }
  ]
}"""


# =============================================================================
# USER PROMPT BUILDER
# =============================================================================

def describe_media_types(media_types: Sequence[str]) -> str:
    """
    Render the requested media-type filter as prompt text.

    The "all" wildcard wins over any specific type selected alongside it.

    Examples:
        >>> describe_media_types(["all"])
        'all types of media (books, movies, songs, and TV shows)'
        >>> describe_media_types(["books", "tv_shows"])
        'books, tv_shows'
    """
    if "all" in media_types:
        return ALL_MEDIA_TYPES_PHRASE
    return ", ".join(media_types)


def _additional_preferences(
    themes: Optional[str],
    plots: Optional[str],
    genres: Optional[str],
) -> List[str]:
    lines = []
    if themes:
        lines.append(f"Themes: {themes}")
    if plots:
        lines.append(f"Plot preferences: {plots}")
    if genres:
        lines.append(f"Genres: {genres}")
    return lines


def build_recommendation_user_prompt(
    favorite_media: Sequence[str],
    media_types: Sequence[str],
    themes: Optional[str] = None,
    plots: Optional[str] = None,
    genres: Optional[str] = None,
) -> str:
    """
    Build the user prompt for the Recommendation Service.

    The prompt contains:
    - The assistant's role and how many recommendations to return
    - The user's favorites, verbatim, joined by commas
    - Any optional theme/plot/genre notes, one labeled line each
    - The requested media types ("all" expands to the four categories)
    - The JSON shape the answer must follow

    Args:
        favorite_media: Favorite titles in the order the user added them
        media_types: Requested media-type filter values
        themes: Optional themes note
        plots: Optional plot preferences note
        genres: Optional genres note

    Returns:
        The rendered user prompt
    """
    favorites_str = ", ".join(favorite_media)
    media_types_str = describe_media_types(media_types)

    preference_lines = _additional_preferences(themes, plots, genres)
    additional_block = ""
    if preference_lines:
        additional_block = "\nAdditional preferences:\n" + "\n".join(preference_lines)

    return f"""You are a media recommendation expert. Based on the user's preferences, provide {RECOMMENDATION_COUNT_RANGE} personalized recommendations.

User's favorite media: {favorites_str}
{additional_block}

Recommendation types: {media_types_str}

Provide recommendations in the following JSON format:
{OUTPUT_FORMAT_EXAMPLE}

Make sure each recommendation is relevant and includes a compelling explanation."""
