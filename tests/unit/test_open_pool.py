"""
Unit tests for open_pool() startup retry.

ConnectionPool is replaced so no database is needed.
"""

from unittest.mock import MagicMock

import pytest
from psycopg_pool import PoolTimeout

from campus_events.adapters.repository import postgres
from campus_events.adapters.repository.postgres import open_pool


def pool_factory(failures: int):
    """Return a ConnectionPool stand-in whose first `failures` pools time out."""
    created: list[MagicMock] = []

    def factory(**kwargs):
        pool = MagicMock(name=f"pool{len(created)}")
        if len(created) < failures:
            pool.open.side_effect = PoolTimeout("timed out")
        created.append(pool)
        return pool

    return factory, created


class TestOpenPool:
    def test_first_attempt_succeeds(self, monkeypatch) -> None:
        factory, created = pool_factory(failures=0)
        monkeypatch.setattr(postgres, "ConnectionPool", factory)
        sleep = MagicMock()

        pool = open_pool("postgresql://x", 1, 5, sleep=sleep)

        assert pool is created[0]
        pool.open.assert_called_once_with(wait=True, timeout=10.0)
        sleep.assert_not_called()

    def test_retries_with_exponential_backoff(self, monkeypatch) -> None:
        factory, created = pool_factory(failures=3)
        monkeypatch.setattr(postgres, "ConnectionPool", factory)
        sleep = MagicMock()

        pool = open_pool("postgresql://x", 1, 5, attempts=5, backoff_seconds=1.0, sleep=sleep)

        assert pool is created[3]
        assert [call.args[0] for call in sleep.call_args_list] == [1.0, 2.0, 4.0]
        for failed in created[:3]:
            failed.close.assert_called_once()

    def test_gives_up_after_attempts(self, monkeypatch) -> None:
        factory, created = pool_factory(failures=10)
        monkeypatch.setattr(postgres, "ConnectionPool", factory)
        sleep = MagicMock()

        with pytest.raises(RuntimeError, match="after 3 attempts"):
            open_pool("postgresql://x", 1, 5, attempts=3, sleep=sleep)

        assert len(created) == 3
        assert sleep.call_count == 2
