"""
Application state for one dashboard session.

The cached lists are only changed through the action methods below. Each
mutation is applied locally first, then sent to Supabase; if the remote call
fails, the inverse captured at mutation time is applied and last_error is set.
"""
import logging
from typing import Callable, List, Optional

from yks.database import DatabaseClient
from yks.models import DenemeEntry, StudyEntry

logger = logging.getLogger(__name__)

MSG_FETCH_ENTRIES = "Çalışma kayıtları yüklenemedi."
MSG_ADD_ENTRY = "Çalışma kaydedilemedi."
MSG_DELETE_ENTRY = "Kayıt silinemedi."
MSG_FETCH_DENEMELER = "Deneme sonuçları yüklenemedi."
MSG_ADD_DENEME = "Deneme kaydedilemedi."
MSG_DELETE_DENEME = "Deneme silinemedi."


class AppState:
    """In-memory copy of the student's records, unsynchronized across tabs."""

    def __init__(self, database: DatabaseClient):
        self.db = database
        self.entries: List[StudyEntry] = []
        self.denemeler: List[DenemeEntry] = []
        self.last_error: Optional[str] = None

    def dismiss_error(self):
        self.last_error = None

    # ============= Study entries =============

    def refresh_entries(self) -> bool:
        fetched = self.db.get_study_entries()
        if fetched is None:
            self.last_error = MSG_FETCH_ENTRIES
            return False
        self.entries = fetched
        return True

    def add_entry(self, entry: StudyEntry) -> bool:
        """Show the entry at the top of the list immediately; drop it again if the insert fails."""
        return self._commit(
            "entries",
            forward=lambda items: [entry] + items,
            inverse=lambda items: [e for e in items if e.id != entry.id],
            remote=lambda: self.db.insert_study_entry(entry),
            message=MSG_ADD_ENTRY,
            replace=entry.id,
        )

    def delete_entry(self, entry_id: str) -> bool:
        forward, inverse = _removal(self.entries, entry_id)
        return self._commit(
            "entries",
            forward=forward,
            inverse=inverse,
            remote=lambda: self.db.delete_study_entry(entry_id),
            message=MSG_DELETE_ENTRY,
        )

    # ============= Denemeler =============

    def refresh_denemeler(self) -> bool:
        fetched = self.db.get_denemeler()
        if fetched is None:
            self.last_error = MSG_FETCH_DENEMELER
            return False
        self.denemeler = fetched
        return True

    def add_deneme(self, deneme: DenemeEntry) -> bool:
        return self._commit(
            "denemeler",
            forward=lambda items: [deneme] + items,
            inverse=lambda items: [d for d in items if d.id != deneme.id],
            remote=lambda: self.db.insert_deneme(deneme),
            message=MSG_ADD_DENEME,
            replace=deneme.id,
        )

    def delete_deneme(self, deneme_id: str) -> bool:
        forward, inverse = _removal(self.denemeler, deneme_id)
        return self._commit(
            "denemeler",
            forward=forward,
            inverse=inverse,
            remote=lambda: self.db.delete_deneme(deneme_id),
            message=MSG_DELETE_DENEME,
        )

    # ============= Two-phase commit =============

    def _commit(
        self,
        attr: str,
        forward: Callable[[list], list],
        inverse: Callable[[list], list],
        remote: Callable,
        message: str,
        replace: Optional[str] = None,
    ) -> bool:
        """
        Apply forward, run remote, undo with inverse on failure.

        remote returns a falsy value on failure. For inserts, `replace` names
        the tentative record to swap for the row Supabase returned.
        """
        setattr(self, attr, forward(getattr(self, attr)))
        result = remote()
        if not result:
            logger.error(f"{message} Rolling back local {attr}.")
            setattr(self, attr, inverse(getattr(self, attr)))
            self.last_error = message
            return False
        if replace is not None and result is not True:
            setattr(self, attr, [result if r.id == replace else r for r in getattr(self, attr)])
        return True


def _removal(items: list, record_id: str):
    """
    Forward/inverse pair for deleting record_id from items.

    The removed record and its index are captured now, so a rollback puts it
    back where it was. Unknown ids give a no-op pair.
    """
    index = next((i for i, r in enumerate(items) if r.id == record_id), None)
    if index is None:
        return (lambda current: current), (lambda current: current)
    removed = items[index]

    def forward(current):
        return [r for r in current if r.id != record_id]

    def inverse(current):
        restored = list(current)
        restored.insert(min(index, len(restored)), removed)
        return restored

    return forward, inverse
