"""
Database operations for YKS Pro.
Handles Supabase CRUD for study entries and deneme results.

Every method logs and swallows its own failure: inserts and selects return
None, deletes return False. Nothing is retried.
"""
import logging
from typing import List, Optional

from supabase import Client

from db import get_supabase_uncached
from engine import DENEME_TABLE_NAME, STUDY_TABLE_NAME
from yks.models import DenemeEntry, StudyEntry
from yks.scoring import reconcile_total_net

logger = logging.getLogger(__name__)


class DatabaseClient:
    """Wrapper around Supabase client with YKS Pro record operations."""

    def __init__(self, client: Optional[Client] = None):
        self.client: Client = client if client is not None else get_supabase_uncached()

    # ============= Study entries =============

    def insert_study_entry(self, entry: StudyEntry) -> Optional[StudyEntry]:
        """Insert one entry. Returns the stored row as an entry, or None on error."""
        try:
            response = self.client.table(STUDY_TABLE_NAME).insert(entry.to_row()).execute()
            if not response.data:
                logger.error(f"Insert into {STUDY_TABLE_NAME} returned no row for {entry.id}")
                return None
            return StudyEntry.from_row(response.data[0])
        except Exception as e:
            logger.error(f"Error adding study entry: {e}")
            return None

    def get_study_entries(self) -> Optional[List[StudyEntry]]:
        """All entries, newest first. None if the select failed."""
        try:
            response = self.client.table(STUDY_TABLE_NAME).select("*").order("date", desc=True).execute()
        except Exception as e:
            logger.error(f"Error fetching study entries: {e}")
            return None
        entries = []
        for row in response.data or []:
            try:
                entries.append(StudyEntry.from_row(row))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed study row {row.get('id')}: {e}")
        return entries

    def delete_study_entry(self, entry_id: str) -> bool:
        try:
            self.client.table(STUDY_TABLE_NAME).delete().eq("id", str(entry_id)).execute()
            return True
        except Exception as e:
            logger.error(f"Error deleting study entry {entry_id}: {e}")
            return False

    # ============= Denemeler =============

    def insert_deneme(self, deneme: DenemeEntry) -> Optional[DenemeEntry]:
        try:
            response = self.client.table(DENEME_TABLE_NAME).insert(deneme.to_row()).execute()
            if not response.data:
                logger.error(f"Insert into {DENEME_TABLE_NAME} returned no row for {deneme.id}")
                return None
            return DenemeEntry.from_row(response.data[0])
        except Exception as e:
            logger.error(f"Error saving deneme: {e}")
            return None

    def get_denemeler(self) -> Optional[List[DenemeEntry]]:
        """
        All denemeler, newest first. None if the select failed.

        Stored total_net is checked against the section scores; see
        reconcile_total_net.
        """
        try:
            response = (
                self.client.table(DENEME_TABLE_NAME)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching deneme results: {e}")
            return None
        denemeler = []
        for row in response.data or []:
            try:
                denemeler.append(reconcile_total_net(DenemeEntry.from_row(row)))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed deneme row {row.get('id')}: {e}")
        return denemeler

    def delete_deneme(self, deneme_id: str) -> bool:
        try:
            self.client.table(DENEME_TABLE_NAME).delete().eq("id", str(deneme_id)).execute()
            return True
        except Exception as e:
            logger.error(f"Error deleting deneme {deneme_id}: {e}")
            return False
