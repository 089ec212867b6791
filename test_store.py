"""AppState actions: optimistic updates and rollback on remote failure."""
from unittest.mock import MagicMock

import pytest

from engine import DENEME_TABLE_NAME, STUDY_TABLE_NAME
from yks.models import ExamType, Subject, SubjectScore, new_study_entry
from yks.scoring import new_deneme_entry
from yks.store import MSG_ADD_ENTRY, MSG_DELETE_DENEME, MSG_DELETE_ENTRY, MSG_FETCH_ENTRIES, AppState


@pytest.fixture
def state(database, sample_entries):
    for entry in reversed(sample_entries):
        database.insert_study_entry(entry)
    app = AppState(database)
    assert app.refresh_entries() is True
    return app


def test_refresh_loads_newest_first(state, sample_entries):
    assert [e.id for e in state.entries] == [e.id for e in sample_entries]


def test_add_entry_puts_it_on_top(state, supabase):
    entry = new_study_entry(Subject.KIMYA, "Gazlar", 12, 4, 25)
    assert state.add_entry(entry) is True
    assert state.entries[0] == entry
    assert len(state.entries) == 4
    assert state.last_error is None
    assert any(r["id"] == entry.id for r in supabase.tables[STUDY_TABLE_NAME])


def test_failed_add_is_rolled_back(state, supabase, sample_entries):
    supabase.fail(STUDY_TABLE_NAME, "insert")
    entry = new_study_entry(Subject.KIMYA, "Gazlar", 12, 4, 25)
    assert state.add_entry(entry) is False
    assert state.entries == sample_entries
    assert state.last_error == MSG_ADD_ENTRY


def test_add_is_visible_before_remote_call_returns(sample_entries):
    seen = []
    db = MagicMock()

    def insert(entry):
        seen.append([e.id for e in app.entries])
        return entry

    db.insert_study_entry.side_effect = insert
    app = AppState(db)
    entry = sample_entries[0]
    app.add_entry(entry)
    assert seen == [[entry.id]]


def test_delete_entry(state, sample_entries):
    assert state.delete_entry(sample_entries[1].id) is True
    assert [e.id for e in state.entries] == [sample_entries[0].id, sample_entries[2].id]


def test_failed_delete_restores_record_at_its_index(state, supabase, sample_entries):
    supabase.fail(STUDY_TABLE_NAME, "delete")
    assert state.delete_entry(sample_entries[1].id) is False
    assert state.entries == sample_entries
    assert state.last_error == MSG_DELETE_ENTRY


def test_rollback_uses_inverse_captured_at_mutation_time(sample_entries):
    db = MagicMock()
    app = AppState(db)
    app.entries = list(sample_entries)
    extra = new_study_entry(Subject.TARIH, "İnkılap", 5, 0, 15)

    def failing_delete(entry_id):
        # list changes while the delete is in flight
        app.entries = [extra] + app.entries
        return False

    db.delete_study_entry.side_effect = failing_delete
    app.delete_entry(sample_entries[2].id)
    assert sample_entries[2] in app.entries
    assert app.entries[0] == extra
    assert len(app.entries) == 4


@pytest.mark.parametrize("remote_ok", [True, False])
def test_deleting_unknown_id_leaves_list_unchanged(state, supabase, sample_entries, remote_ok):
    if not remote_ok:
        supabase.fail(STUDY_TABLE_NAME, "delete")
    state.delete_entry("never-existed")
    assert state.entries == sample_entries


def test_failed_refresh_keeps_cached_entries(state, supabase, sample_entries):
    supabase.fail(STUDY_TABLE_NAME, "select")
    assert state.refresh_entries() is False
    assert state.entries == sample_entries
    assert state.last_error == MSG_FETCH_ENTRIES
    state.dismiss_error()
    assert state.last_error is None


def test_deneme_actions(database, supabase):
    app = AppState(database)
    deneme = new_deneme_entry(ExamType.TYT, {"turkce": SubjectScore(20, 4), "matematik": SubjectScore(10, 0)})
    assert app.add_deneme(deneme) is True
    assert app.denemeler == [deneme]
    assert app.refresh_denemeler() is True
    assert app.denemeler == [deneme]

    supabase.fail(DENEME_TABLE_NAME, "delete")
    assert app.delete_deneme(deneme.id) is False
    assert app.denemeler == [deneme]
    assert app.last_error == MSG_DELETE_DENEME

    supabase.failures.clear()
    assert app.delete_deneme(deneme.id) is True
    assert app.denemeler == []


def test_failed_deneme_save_is_removed_again(database, supabase):
    supabase.fail(DENEME_TABLE_NAME, "insert")
    app = AppState(database)
    deneme = new_deneme_entry(ExamType.AYT, {"felsefe": SubjectScore(10, 2)})
    assert app.add_deneme(deneme) is False
    assert app.denemeler == []
