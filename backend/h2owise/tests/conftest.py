"""Pytest fixtures for API tests.

Builds the app from explicit settings and swaps the store and the question
generator for in-memory doubles through dependency overrides.
"""

import itertools
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from h2owise.app import create_app
from h2owise.config import Settings
from h2owise.core.store import QUESTIONS_TABLE, USER_SCORES_TABLE
from h2owise.routes import get_generator, get_store


class FakeStore:
    """In-memory stand-in honouring the DataStore protocol."""

    def __init__(self):
        self.tables = {QUESTIONS_TABLE: [], USER_SCORES_TABLE: []}
        self._ids = itertools.count(1)

    @staticmethod
    def _matches(row, filters):
        return all(str(row.get(k)) == str(v) for k, v in (filters or {}).items())

    async def select(self, table, filters=None, order_by=None, ascending=True, limit=None):
        rows = [dict(r) for r in self.tables[table] if self._matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: r[order_by], reverse=not ascending)
        if limit is not None:
            rows = rows[:limit]
        return rows

    async def insert(self, table, rows):
        inserted = [{"id": next(self._ids), **r} for r in rows]
        self.tables[table].extend(inserted)
        return [dict(r) for r in inserted]

    async def delete(self, table, filters):
        self.tables[table] = [r for r in self.tables[table] if not self._matches(r, filters)]


@pytest.fixture
def settings():
    return Settings(supabase_url="https://demo.supabase.co", supabase_key="anon-key")


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def generator():
    gen = MagicMock()
    gen.generate_question = AsyncMock()
    return gen


@pytest.fixture
def app(settings, store, generator):
    app = create_app(settings)
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_generator] = lambda: generator
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


def make_question(qid, correct_index, text=None):
    return {
        "id": qid,
        "text": text or f"Question {qid}",
        "options": ["A", "B", "C", "D"],
        "correct_index": correct_index,
    }
