import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from app.core.exceptions import ConfigurationError
from app.db import bootstrap


def _raise_error(message: str):
    raise ConfigurationError(message)


def test_runtime_schema_bootstrap_raises_on_validation_failure(monkeypatch):
    monkeypatch.setattr(bootstrap.Base.metadata, "create_all", lambda bind: None)
    monkeypatch.setattr(
        bootstrap,
        "_assert_required_columns",
        lambda: _raise_error("missing required schema"),
    )

    with pytest.raises(RuntimeError, match="Runtime schema compatibility bootstrap failed"):
        bootstrap.ensure_runtime_schema_compatibility()


def test_runtime_schema_bootstrap_reports_columns_missing_from_existing_tables(monkeypatch):
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE teachers (id VARCHAR(36) PRIMARY KEY, email VARCHAR(255))"))
    monkeypatch.setattr(bootstrap, "engine", engine)

    with pytest.raises(RuntimeError) as excinfo:
        bootstrap.ensure_runtime_schema_compatibility()

    cause = excinfo.value.__cause__
    assert isinstance(cause, ConfigurationError)
    assert "teachers.teacher_code" in cause.message
    assert "courses." not in cause.message
    engine.dispose()


def test_runtime_schema_bootstrap_succeeds_on_fresh_database():
    bootstrap.ensure_runtime_schema_compatibility()
