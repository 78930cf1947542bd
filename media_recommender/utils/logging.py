"""
Logging utilities for the AI Media Recommender backend.

Privacy rules for every logger in this package:
- NEVER log Supabase access tokens, the Gemini API key, or other secrets
- NEVER log the full free-text theme/plot/genre notes a user typed
- NEVER log raw model output beyond a short preview on parse failures

Acceptable logging:
- High-level events (e.g., "Generating recommendations", "Session stored")
- Identifiers and counts (user_id, number of favorites, number of results)
- Error types and sanitized error messages
"""

import logging
from typing import Optional

from media_recommender.config import settings


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to LOG_LEVEL from settings)

    Returns:
        Configured logger instance

    Usage:
        >>> from media_recommender.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)

    # Add handler if not already configured (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
