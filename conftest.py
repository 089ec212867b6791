"""Shared fixtures: in-memory Supabase stand-in, stub Gemini client, sample records."""
import sys
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from yks.database import DatabaseClient
from yks.models import Subject, new_study_entry


class FakeQuery:
    """Chainable subset of the supabase-py query builder: select/insert/delete/eq/order/limit."""

    def __init__(self, backend, table):
        self.backend = backend
        self.table = table
        self.op = "select"
        self.rows = []
        self.filters = []
        self.ordering = None
        self.max_rows = None

    def select(self, *columns, **kwargs):
        self.op = "select"
        return self

    def insert(self, rows):
        self.op = "insert"
        self.rows = rows if isinstance(rows, list) else [rows]
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, n):
        self.max_rows = n
        return self

    def _matches(self, row):
        return all(str(row.get(c)) == str(v) for c, v in self.filters)

    def execute(self):
        self.backend.calls.append((self.table, self.op))
        if (self.table, self.op) in self.backend.failures:
            raise RuntimeError(f"simulated {self.op} failure on {self.table}")
        stored = self.backend.tables.setdefault(self.table, [])
        if self.op == "insert":
            copies = [dict(r) for r in self.rows]
            stored.extend(copies)
            return SimpleNamespace(data=[dict(r) for r in copies], count=None)
        if self.op == "delete":
            removed = [r for r in stored if self._matches(r)]
            self.backend.tables[self.table] = [r for r in stored if not self._matches(r)]
            return SimpleNamespace(data=removed, count=None)
        data = [dict(r) for r in stored if self._matches(r)]
        if self.ordering:
            column, desc = self.ordering
            data.sort(key=lambda r: r.get(column) or "", reverse=desc)
        if self.max_rows is not None:
            data = data[: self.max_rows]
        return SimpleNamespace(data=data, count=len(data))


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.failures = set()
        self.calls = []

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, op):
        self.failures.add((table, op))


class StubGemini:
    """Mimics genai.Client().models.generate_content; records prompts."""

    def __init__(self, text="## Tavsiye\nHarika gidiyorsun!", error=None):
        self.prompts = []
        self.text = text
        self.error = error
        self.models = self

    def generate_content(self, model, contents):
        self.prompts.append(contents)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def database(supabase):
    return DatabaseClient(client=supabase)


@pytest.fixture
def gemini():
    return StubGemini()


@pytest.fixture
def sample_entries():
    """Three entries, newest first, like the dashboard list."""
    return [
        new_study_entry(Subject.MATEMATIK, "Fonksiyonlar", 30, 8, 60, when=datetime(2026, 3, 10, 14, 0)),
        new_study_entry(Subject.FIZIK, "Kuvvet", 10, 4, 30, when=datetime(2026, 3, 9, 19, 30)),
        new_study_entry(Subject.MATEMATIK, "Türev", 20, 0, 45, when=datetime(2026, 3, 2, 9, 15)),
    ]
