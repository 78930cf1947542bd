"""
Recommendation JSON Schemas

Strict output schema passed to the generative model. Every object level sets
additionalProperties to false and lists all of its properties as required,
so the model cannot add or drop fields.

The item-level "type" enum is the per-item classification
(book/movie/song/tv_show), not the request-side filter.
"""

from media_recommender.schemas.recommendations import RECOMMENDATION_TYPES

RECOMMENDATION_ITEM_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "type": {"type": "string", "enum": list(RECOMMENDATION_TYPES)},
        "creator": {"type": "string"},
        "year": {"type": "string"},
        "description": {"type": "string"},
    },
    "required": ["title", "type", "creator", "year", "description"],
    "additionalProperties": False,
}

RECOMMENDATION_OUTPUT_SCHEMA = {
    "type": "object",
    "properties": {
        "recommendations": {
            "type": "array",
            "items": RECOMMENDATION_ITEM_SCHEMA,
        },
    },
    "required": ["recommendations"],
    "additionalProperties": False,
}
