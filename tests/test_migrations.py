"""Schema migration stays in step with the ORM models."""

import importlib.util
from pathlib import Path

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from finratio.models import Base

VERSIONS = Path(__file__).resolve().parent.parent / "migrations" / "versions"


def load_revision(filename: str):
    module_spec = importlib.util.spec_from_file_location(filename.removesuffix(".py"), VERSIONS / filename)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def test_initial_revision_creates_model_tables(tmp_path):
    revision = load_revision("001_create_finratio_schema.py")
    engine = create_engine(f"sqlite:///{tmp_path / 'schema.db'}")

    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            revision.upgrade()

        inspector = inspect(conn)
        assert set(inspector.get_table_names()) == set(Base.metadata.tables)
        for name, table in Base.metadata.tables.items():
            migrated = {c["name"] for c in inspector.get_columns(name)}
            assert migrated == {c.name for c in table.columns}, name

    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            revision.downgrade()
        assert inspect(conn).get_table_names() == []
    engine.dispose()
