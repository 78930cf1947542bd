#!/usr/bin/env python3
"""
Local recommendation runner

Calls the real Gemini model through the recommendation service without the
HTTP layer, Supabase, or a signed-in user. Sessions are kept in memory and
printed instead of being stored.

Usage:
    python scripts/generate_recommendations.py --favorite "The Matrix" --favorite "Inception"
    python scripts/generate_recommendations.py -f "Harry Potter" -f "The Beatles" --type all
    python scripts/generate_recommendations.py -f "Dune" --type books --type movies --themes "politics, ecology"

Requires GOOGLE_API_KEY in the environment or in .env.
"""

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime, timezone
from typing import List, Optional

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from media_recommender.config import settings
from media_recommender.forms.preference_form import (
    PreferenceForm,
    PreferenceFormError,
    group_recommendations_by_type,
    media_type_label,
    web_search_url,
)
from media_recommender.schemas.recommendations import (
    MEDIA_TYPE_FILTERS,
    NewRecommendationSession,
    RecommendationSession,
)
from media_recommender.services.gemini_client import GeminiGenerativeModel
from media_recommender.services.recommendation_service import (
    RecommendationServiceError,
    generate_recommendations,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class PrintingHistoryStore:
    """History store that keeps sessions in memory for the lifetime of the script."""

    def __init__(self) -> None:
        self.sessions: List[RecommendationSession] = []

    async def create_session(self, record: NewRecommendationSession) -> None:
        session = RecommendationSession(
            id=len(self.sessions) + 1,
            created_at=datetime.now(timezone.utc),
            **record.model_dump(),
        )
        self.sessions.append(session)
        logger.info(f"Session #{session.id} kept in memory (not persisted)")

    async def list_sessions_for_user(self, user_id: int) -> List[RecommendationSession]:
        return [s for s in self.sessions if s.user_id == user_id]


async def run(
    favorites: List[str],
    media_types: List[str],
    themes: Optional[str] = None,
    plots: Optional[str] = None,
    genres: Optional[str] = None,
) -> int:
    """Generate and print one set of recommendations. Returns an exit code."""
    if not settings.GOOGLE_API_KEY:
        print("\nERROR: GOOGLE_API_KEY environment variable not set!")
        print("   Please set it in your .env file or export it:")
        print("   export GOOGLE_API_KEY=your-gemini-api-key")
        return 2

    form = PreferenceForm()
    for favorite in favorites:
        form.add_favorite(favorite)
    form.themes = themes or ""
    form.plots = plots or ""
    form.genres = genres or ""
    form.select_media_types(media_types)

    try:
        request = form.build_request()
    except PreferenceFormError as e:
        print(f"\nERROR: {e}")
        return 2

    print("\n" + "=" * 60)
    print("MEDIA RECOMMENDATIONS")
    print("=" * 60)
    print(f"\nFavorites:   {', '.join(request.favorite_media)}")
    print(f"Media types: {', '.join(request.media_types)}")
    print(f"\nCalling Gemini ({settings.GEMINI_MODEL})...")

    store = PrintingHistoryStore()
    try:
        recommendations = await generate_recommendations(
            model=GeminiGenerativeModel(),
            store=store,
            user_id=0,
            favorite_media=request.favorite_media,
            media_types=request.media_types,
            themes=request.themes,
            plots=request.plots,
            genres=request.genres,
        )
    except RecommendationServiceError as e:
        print(f"\nERROR: {e.message}")
        return 1

    for media_type, items in group_recommendations_by_type(recommendations).items():
        print(f"\n--- {media_type_label(media_type)}s ({len(items)}) ---")
        for item in items:
            print(f"  {item.title} - {item.creator} ({item.year})")
            print(f"    {item.description}")
            print(f"    {web_search_url(item)}")

    print()
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Generate media recommendations locally",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/generate_recommendations.py -f "The Matrix" -f "Inception" --type movies
  python scripts/generate_recommendations.py -f "Harry Potter" --genres "fantasy" --type books --type tv_shows
        """
    )

    parser.add_argument(
        "--favorite", "-f",
        action="append",
        default=[],
        help="Favorite title (repeat for several)"
    )
    parser.add_argument(
        "--type", "-t",
        dest="media_types",
        action="append",
        choices=MEDIA_TYPE_FILTERS,
        default=[],
        help="Media type to recommend (repeat for several; default or any 'all': all types)"
    )
    parser.add_argument("--themes", type=str, help="Themes you enjoy (optional)")
    parser.add_argument("--plots", type=str, help="Plot preferences (optional)")
    parser.add_argument("--genres", type=str, help="Preferred genres (optional)")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    sys.exit(asyncio.run(run(
        favorites=args.favorite,
        media_types=args.media_types,
        themes=args.themes,
        plots=args.plots,
        genres=args.genres,
    )))


if __name__ == "__main__":
    main()
