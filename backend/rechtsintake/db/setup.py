"""
Apply the Rechtsintake schema to a PostgreSQL database.

The schema is idempotent, so running this against an existing database
only adds what is missing and re-seeds the legal-area case types.

Usage:
    python -m rechtsintake.db.setup              # uses DATABASE_URL from .env
    python -m rechtsintake.db.setup <url>        # explicit connection string
"""

import os
import sys
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

from ..knowledge import LEGAL_AREA_NAMES

SCHEMA_FILE = Path(__file__).parent / "schema.sql"


def run_schema(database_url: str) -> list[str]:
    """Execute schema.sql and return the case types that are missing afterwards."""
    print("Connecting to database...")
    conn = psycopg2.connect(database_url)
    conn.autocommit = True
    try:
        with conn.cursor() as cur:
            print("Applying schema...")
            cur.execute(SCHEMA_FILE.read_text(encoding="utf-8"))

            cur.execute("""
                SELECT table_name
                FROM information_schema.tables
                WHERE table_schema = 'public'
                AND table_type = 'BASE TABLE'
                ORDER BY table_name;
            """)
            print(f"Tables: {', '.join(row[0] for row in cur.fetchall())}")

            cur.execute("SELECT name FROM case_types;")
            seeded = {row[0] for row in cur.fetchall()}
    finally:
        conn.close()

    missing = [name for name in LEGAL_AREA_NAMES if name not in seeded]
    if missing:
        print(f"WARNING: case types without a row: {', '.join(missing)}")
    else:
        print(f"Case types: {len(LEGAL_AREA_NAMES)} legal areas seeded")
    print("Done. Database is ready.")
    return missing


def main() -> None:
    load_dotenv()
    url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("DATABASE_URL", "")
    if not url:
        print("ERROR: No DATABASE_URL provided.")
        print("Either set it in .env or pass as argument:")
        print("  python -m rechtsintake.db.setup 'postgresql://...'")
        sys.exit(1)
    sys.exit(1 if run_schema(url) else 0)


if __name__ == "__main__":
    main()
