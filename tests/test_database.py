import logging

from sqlalchemy import text

from casemail import database


def test_slow_query_is_logged(monkeypatch, caplog):
    monkeypatch.setattr(database, "SLOW_QUERY_THRESHOLD", -1.0)

    with caplog.at_level(logging.WARNING, logger="casemail.database"):
        with database.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    assert any("🐌 Slow query" in r.getMessage() and "SELECT 1" in r.getMessage() for r in caplog.records)


def test_fast_query_is_not_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="casemail.database"):
        with database.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    assert not any("Slow query" in r.getMessage() for r in caplog.records)
