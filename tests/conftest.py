"""Pytest configuration for test isolation.

Settings are read from ``STATEMENT_INGEST_*`` environment variables and the
database client caches one engine per URL for the life of the process. A
developer's shell (or a ``.env`` loaded by an earlier CLI test) could leak
either into later tests, so every test starts from a clean environment and
an empty engine cache.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from db.client import dispose_engines


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop ingest settings and DATABASE_URL inherited from the outer shell."""

    for key in list(os.environ):
        if key.startswith("STATEMENT_INGEST_") or key == "DATABASE_URL":
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _isolate_engines() -> Iterator[None]:
    """Dispose cached engines so SQLite files from one test are never reused."""

    yield
    dispose_engines()
