"""Supabase schema for YKS Pro. Prints the SQL to run and optionally checks the tables exist."""
import argparse
import logging
import sys

from db import get_supabase_uncached
from engine import DENEME_TABLE_NAME, STUDY_TABLE_NAME

logger = logging.getLogger(__name__)

SCHEMA_SQL = f"""
-- Study log
CREATE TABLE IF NOT EXISTS {STUDY_TABLE_NAME} (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    date TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    subject VARCHAR(50) NOT NULL,
    topic TEXT NOT NULL,
    question_count INT NOT NULL DEFAULT 0,
    correct_count INT,
    incorrect_count INT,
    duration_minutes INT NOT NULL DEFAULT 0,
    notes TEXT
);

-- Mock exam (deneme) results
CREATE TABLE IF NOT EXISTS {DENEME_TABLE_NAME} (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    exam_type VARCHAR(3) NOT NULL CHECK (exam_type IN ('TYT', 'AYT')),
    scores JSONB NOT NULL DEFAULT '{{}}',
    total_net DECIMAL(6,2) NOT NULL DEFAULT 0,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_{STUDY_TABLE_NAME}_date ON {STUDY_TABLE_NAME}(date DESC);
CREATE INDEX IF NOT EXISTS idx_{DENEME_TABLE_NAME}_created_at ON {DENEME_TABLE_NAME}(created_at DESC);
"""


def check_tables() -> bool:
    """Select one row from each table; False if the client or any table is unavailable."""
    try:
        client = get_supabase_uncached()
    except ValueError as e:
        logger.error(f"{e}")
        return False
    ok = True
    for table in (STUDY_TABLE_NAME, DENEME_TABLE_NAME):
        try:
            response = client.table(table).select("id").limit(1).execute()
            logger.info(f"✓ {table} exists (rows: {len(response.data or [])})")
        except Exception as e:
            logger.error(f"✗ {table}: {e}")
            ok = False
    return ok


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(description="Print the YKS Pro Supabase schema.")
    parser.add_argument("--check", action="store_true", help="Also check both tables exist (needs SUPABASE_URL/SUPABASE_KEY)")
    args = parser.parse_args()

    print("Run this SQL in Supabase SQL Editor (https://app.supabase.com > SQL Editor > New Query):")
    print(SCHEMA_SQL)
    if args.check:
        sys.exit(0 if check_tables() else 1)
