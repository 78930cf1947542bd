"""
Database access layer for the AI Media Recommender backend.

All database operations MUST:
- Respect Row Level Security (RLS)
- Never bypass RLS with a service-role key
- Filter user-owned rows by owner in addition to RLS

Table definitions live in supabase/migrations/, not here.
"""

from .client import get_supabase_client

__all__ = ["get_supabase_client"]
