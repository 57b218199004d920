from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from src.infrastructure.database import check_database_health, create_db_and_tables, get_db_session


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    yield engine
    engine.dispose()


@pytest.mark.unit
class TestDatabase:
    def test_create_db_and_tables(self, engine):
        create_db_and_tables(engine)

        tables = set(inspect(engine).get_table_names())
        assert {"contact_submissions", "newsletter_subscriptions"} <= tables

    def test_health_check(self, engine):
        assert check_database_health(engine)

    def test_health_check_reports_failure(self):
        broken = MagicMock(name="engine")
        with patch("src.infrastructure.database.database.Session") as session_cls:
            session_cls.return_value.__enter__.return_value.exec.side_effect = OperationalError(
                "SELECT 1", {}, Exception("down")
            )
            assert not check_database_health(broken)

    def test_session_rolls_back_on_error(self, engine):
        with patch("src.infrastructure.database.database.Session") as session_cls:
            session = session_cls.return_value
            with pytest.raises(RuntimeError):
                with get_db_session(engine):
                    raise RuntimeError("boom")

        session.rollback.assert_called_once()
        session.close.assert_called_once()
