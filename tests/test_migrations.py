"""Tests for the Alembic migration history."""

from pathlib import Path

from alembic import command
from alembic.autogenerate import compare_metadata
from alembic.config import Config
from alembic.migration import MigrationContext
from sqlalchemy import create_engine

from homestock.database import Base

ROOT = Path(__file__).resolve().parents[1]


def test_migrations_create_every_model_index(tmp_path):
    """Upgrading to head leaves no index drift against the models."""
    engine = create_engine(f"sqlite:///{tmp_path / 'migrated.db'}")
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "alembic"))

    with engine.begin() as connection:
        config.attributes["connection"] = connection
        command.upgrade(config, "head")
        diff = compare_metadata(MigrationContext.configure(connection), Base.metadata)

    index_changes = [
        (change[0], change[1].name)
        for change in diff
        if isinstance(change, tuple) and change[0] in ("add_index", "remove_index")
    ]
    assert index_changes == []
    engine.dispose()
