"""
Tests for the Supabase migration that defines app_user privileges.

The API client runs with the caller's own token, so whatever the
authenticated role may write through PostgREST, a user can write about
themselves. app_user.role must stay out of that set.
"""

import re
from pathlib import Path

import pytest

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "supabase" / "migrations"


@pytest.fixture
def migration_sql() -> str:
    return "\n".join(
        path.read_text(encoding="utf-8") for path in sorted(MIGRATIONS_DIR.glob("*.sql"))
    ).lower()


def _column_grants(sql: str, privilege: str) -> list:
    pattern = rf"grant\s+{privilege}\s*\(([^)]*)\)\s*on\s+public\.app_user\s+to\s+authenticated"
    return [
        [column.strip() for column in match.split(",")]
        for match in re.findall(pattern, sql)
    ]


class TestAppUserPrivileges:

    def test_table_wide_writes_revoked(self, migration_sql):
        assert re.search(
            r"revoke\s+insert,\s*update\s+on\s+public\.app_user\s+from\s+anon,\s*authenticated",
            migration_sql,
        )

    @pytest.mark.parametrize("privilege", ["insert", "update"])
    def test_role_not_writable_by_authenticated(self, migration_sql, privilege):
        grants = _column_grants(migration_sql, privilege)

        assert grants, f"expected a column-level {privilege} grant on app_user"
        for columns in grants:
            assert "role" not in columns
            assert "last_signed_in" in columns

    def test_no_table_wide_grant_to_authenticated(self, migration_sql):
        assert not re.search(
            r"grant\s+(all|insert|update)[^;(]*on\s+(table\s+)?public\.app_user\s+to\s+[^;]*authenticated",
            migration_sql,
        )

    def test_role_assigned_by_trigger(self, migration_sql):
        assert "before insert or update on public.app_user" in migration_sql
        assert "current_setting('app.owner_open_id', true)" in migration_sql
        assert "new.role := old.role" in migration_sql
