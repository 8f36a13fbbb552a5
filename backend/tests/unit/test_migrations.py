"""Tests for the Alembic migrations that create the preference schema."""

import importlib.util
from pathlib import Path

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from config import configure_preferences

VERSIONS_DIR = Path(__file__).resolve().parents[2] / "alembic" / "versions"
USERS_REVISION = "3c1d9a7e5b20_create_users_table.py"
PREFERENCES_REVISION = "8e4f2b6a91c3_create_model_preferences_table.py"


def _load_revision(filename: str):
    spec = importlib.util.spec_from_file_location(filename[:-3], VERSIONS_DIR / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _run(step: str) -> dict[str, set[str]]:
    """Apply (or revert) both revisions on a fresh database; return its tables."""
    engine = create_engine("sqlite:///:memory:")
    users = _load_revision(USERS_REVISION)
    preferences = _load_revision(PREFERENCES_REVISION)

    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            users.upgrade()
            preferences.upgrade()
            if step == "downgrade":
                preferences.downgrade()
                users.downgrade()

        insp = inspect(conn)
        return {
            table: {column["name"] for column in insp.get_columns(table)}
            for table in insp.get_table_names()
        }


class TestPreferenceMigration:
    """Tests for the create-preferences revision."""

    def test_revision_chain(self):
        """The preferences revision follows the users revision."""
        users = _load_revision(USERS_REVISION)
        preferences = _load_revision(PREFERENCES_REVISION)
        assert users.down_revision is None
        assert preferences.down_revision == users.revision

    def test_upgrade_creates_default_table(self):
        """The table gets the default name and every column."""
        tables = _run("upgrade")

        assert tables["model_preferences"] == {
            "id",
            "preference",
            "value",
            "preferable_id",
            "preferable_type",
            "created_at",
            "updated_at",
        }
        assert "email" in tables["users"]

    def test_upgrade_uses_configured_table_name(self):
        """A runtime table name is honored by the migration."""
        configure_preferences(table="custom_preferences")

        tables = _run("upgrade")

        assert "custom_preferences" in tables
        assert "model_preferences" not in tables

    def test_downgrade_drops_tables(self):
        """Downgrading removes both tables."""
        assert _run("downgrade") == {}
