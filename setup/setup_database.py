#!/usr/bin/env python3
"""
Database setup script for the Time Bank Portal.

Creates the Supabase schema programmatically using direct PostgreSQL connection.

Usage:
    python setup/setup_database.py           # Create schema
    python setup/setup_database.py --verify  # Verify existing schema
    python setup/setup_database.py --drop    # Drop and recreate (DANGEROUS)
"""

import argparse
import sys
from pathlib import Path

import psycopg2

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.config_loader import load_config
from utils.logger import setup_logger

logger = setup_logger(name=__name__)


# Tables in creation order (referenced tables first)
TABLES = [
    ("administrators", """
CREATE TABLE IF NOT EXISTS administrators (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    full_name TEXT NOT NULL,
    username TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,

    -- Permission flags
    can_create_collaborator BOOLEAN NOT NULL DEFAULT FALSE,
    can_create_admin BOOLEAN NOT NULL DEFAULT FALSE,
    can_enter_hours BOOLEAN NOT NULL DEFAULT FALSE,
    can_change_access_code BOOLEAN NOT NULL DEFAULT FALSE,

    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""),
    ("collaborators", """
CREATE TABLE IF NOT EXISTS collaborators (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    full_name TEXT NOT NULL,
    badge_number TEXT NOT NULL UNIQUE,
    access_code TEXT UNIQUE,  -- NULL until the collaborator registers one
    direct_leader TEXT,
    balance_hours NUMERIC(10, 2) NOT NULL DEFAULT 0,
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""),
    ("time_entries", """
CREATE TABLE IF NOT EXISTS time_entries (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    collaborator_id UUID NOT NULL REFERENCES collaborators(id) ON DELETE CASCADE,
    date DATE NOT NULL,
    hours_worked NUMERIC(10, 2) NOT NULL CHECK (hours_worked > 0),
    overtime_hours NUMERIC(10, 2) NOT NULL DEFAULT 0,
    balance_hours NUMERIC(10, 2) NOT NULL,  -- Signed change applied by this entry
    entry_type TEXT NOT NULL CHECK (entry_type IN ('positive', 'negative', 'overtime')),
    description TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""),
    ("time_bank_periods", """
CREATE TABLE IF NOT EXISTS time_bank_periods (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    start_date DATE NOT NULL,
    end_date DATE NOT NULL,
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    admin_id UUID REFERENCES administrators(id) ON DELETE SET NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CHECK (start_date < end_date)
);
"""),
    ("announcements", """
CREATE TABLE IF NOT EXISTS announcements (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    content TEXT NOT NULL,
    admin_id UUID REFERENCES administrators(id) ON DELETE SET NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""),
    ("info_banners", """
CREATE TABLE IF NOT EXISTS info_banners (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    image_url TEXT NOT NULL,
    link_url TEXT,
    order_index INTEGER NOT NULL UNIQUE CHECK (order_index BETWEEN 1 AND 5),
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    admin_id UUID REFERENCES administrators(id) ON DELETE SET NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""),
    ("leave_requests", """
CREATE TABLE IF NOT EXISTS leave_requests (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    collaborator_id UUID NOT NULL REFERENCES collaborators(id) ON DELETE CASCADE,
    start_date DATE NOT NULL,
    end_date DATE NOT NULL,
    reason TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending' CHECK (status IN ('pending', 'approved', 'rejected')),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""),
    ("access_code_reset_requests", """
CREATE TABLE IF NOT EXISTS access_code_reset_requests (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    collaborator_id UUID NOT NULL REFERENCES collaborators(id) ON DELETE CASCADE,
    status TEXT NOT NULL DEFAULT 'pending' CHECK (status IN ('pending', 'approved', 'rejected')),
    requested_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    processed_at TIMESTAMPTZ,
    admin_id UUID REFERENCES administrators(id) ON DELETE SET NULL,
    notes TEXT
);
"""),
    ("notifications", """
CREATE TABLE IF NOT EXISTS notifications (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL,
    user_type TEXT NOT NULL CHECK (user_type IN ('admin', 'collaborator')),
    message TEXT NOT NULL,
    type TEXT NOT NULL,
    related_id UUID,
    is_read BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""),
]

CREATE_INDEXES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_collaborators_direct_leader ON collaborators(direct_leader);",
    "CREATE INDEX IF NOT EXISTS idx_collaborators_balance ON collaborators(balance_hours);",
    "CREATE INDEX IF NOT EXISTS idx_time_entries_collaborator ON time_entries(collaborator_id, date DESC);",
    "CREATE INDEX IF NOT EXISTS idx_time_bank_periods_active ON time_bank_periods(is_active);",
    "CREATE INDEX IF NOT EXISTS idx_leave_requests_collaborator ON leave_requests(collaborator_id);",
    "CREATE INDEX IF NOT EXISTS idx_reset_requests_status ON access_code_reset_requests(collaborator_id, status);",
    "CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id, user_type, created_at DESC);",
]

# Used by the dashboard summary (SupabaseClient.get_balance_totals)
CREATE_FUNCTION_SQL = """
CREATE OR REPLACE FUNCTION get_total_positive_negative_hours()
RETURNS TABLE (total_positive_hours NUMERIC, total_negative_hours NUMERIC)
LANGUAGE sql STABLE AS $$
    SELECT
        COALESCE(SUM(balance_hours) FILTER (WHERE balance_hours > 0), 0),
        COALESCE(SUM(balance_hours) FILTER (WHERE balance_hours < 0), 0)
    FROM collaborators;
$$;
"""

EXPECTED_INDEXES = [
    idx_sql.split("INDEX IF NOT EXISTS ")[1].split(" ON")[0] for idx_sql in CREATE_INDEXES_SQL
]

DROP_SQL = (
    "DROP FUNCTION IF EXISTS get_total_positive_negative_hours(); "
    + " ".join(f"DROP TABLE IF EXISTS {name} CASCADE;" for name, _ in reversed(TABLES))
)


def get_database_url(config) -> str:
    """
    Get PostgreSQL database URL.

    Uses DATABASE_URL from .env; exits with instructions when it is missing.
    """
    if config.credentials.database_url:
        return config.credentials.database_url

    logger.error("DATABASE_URL not found in .env file")
    logger.error("\nTo get your DATABASE_URL:")
    logger.error("1. Go to Supabase Dashboard → Project Settings → Database")
    logger.error("2. Find 'Connection string' under 'Connection pooling'")
    logger.error("3. Copy the 'URI' connection string")
    logger.error("4. Add to .env file: DATABASE_URL=postgresql://...")
    sys.exit(1)


def create_connection(database_url: str):
    """Create a PostgreSQL database connection."""
    try:
        conn = psycopg2.connect(database_url)
        logger.info("✓ Connected to PostgreSQL database")
        return conn
    except Exception as e:
        logger.error(f"✗ Failed to connect to database: {e}")
        logger.error("\nMake sure:")
        logger.error("1. DATABASE_URL is correct in .env file")
        logger.error("2. Your IP is allowed in Supabase (Project Settings → Database → Connection pooling)")
        logger.error("3. Database password is correct")
        sys.exit(1)


def execute_sql(conn, sql_statement: str, description: str) -> bool:
    """Execute a SQL statement."""
    try:
        cursor = conn.cursor()
        cursor.execute(sql_statement)
        conn.commit()
        cursor.close()
        logger.info(f"✓ {description}")
        return True
    except Exception as e:
        logger.error(f"✗ {description} failed: {e}")
        conn.rollback()
        return False


def verify_schema(conn) -> bool:
    """Verify that every table, index and the summary function exist."""
    try:
        cursor = conn.cursor()
        ok = True

        for table_name, _ in TABLES:
            cursor.execute("""
                SELECT EXISTS (
                    SELECT FROM information_schema.tables
                    WHERE table_name = %s
                );
            """, (table_name,))
            if cursor.fetchone()[0]:
                logger.info(f"✓ Table '{table_name}' exists")
            else:
                logger.error(f"✗ Table '{table_name}' does not exist")
                ok = False

        cursor.execute("SELECT indexname FROM pg_indexes WHERE schemaname = 'public';")
        indexes = [row[0] for row in cursor.fetchall()]
        for idx in EXPECTED_INDEXES:
            if idx in indexes:
                logger.info(f"✓ Index '{idx}' exists")
            else:
                logger.warning(f"⚠ Index '{idx}' missing")

        cursor.execute("""
            SELECT EXISTS (
                SELECT FROM pg_proc WHERE proname = 'get_total_positive_negative_hours'
            );
        """)
        if cursor.fetchone()[0]:
            logger.info("✓ Function 'get_total_positive_negative_hours' exists")
        else:
            logger.error("✗ Function 'get_total_positive_negative_hours' does not exist")
            ok = False

        cursor.close()
        return ok

    except Exception as e:
        logger.error(f"✗ Schema verification failed: {e}")
        return False


def create_schema(conn) -> bool:
    """Create the database schema."""
    logger.info("\n" + "="*80)
    logger.info("CREATING SCHEMA")
    logger.info("="*80 + "\n")

    # gen_random_uuid() lives in pgcrypto on older Postgres versions
    if not execute_sql(conn, "CREATE EXTENSION IF NOT EXISTS pgcrypto;", "Enabled extension 'pgcrypto'"):
        return False

    for table_name, table_sql in TABLES:
        if not execute_sql(conn, table_sql, f"Created table '{table_name}'"):
            return False

    for idx_sql, idx_name in zip(CREATE_INDEXES_SQL, EXPECTED_INDEXES):
        if not execute_sql(conn, idx_sql, f"Created index '{idx_name}'"):
            return False

    if not execute_sql(conn, CREATE_FUNCTION_SQL, "Created function 'get_total_positive_negative_hours'"):
        return False

    logger.info("\n✓ Database schema created successfully!")
    return True


def drop_schema(conn) -> bool:
    """Drop the existing schema (DANGEROUS)."""
    logger.warning("\n" + "="*80)
    logger.warning("⚠️  WARNING: DROPPING EXISTING SCHEMA")
    logger.warning("="*80)
    logger.warning("This will DELETE ALL DATA: administrators, collaborators, hours and requests!")

    response = input("\nType 'yes' to confirm: ")
    if response.lower() != 'yes':
        logger.info("Aborted.")
        return False

    if not execute_sql(conn, DROP_SQL, "Dropped all time bank tables"):
        return False

    logger.info("✓ Schema dropped")
    return True


def main():
    parser = argparse.ArgumentParser(
        description="Set up database schema for the Time Bank Portal"
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Verify existing schema without creating"
    )
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop and recreate tables (DANGEROUS - deletes all data)"
    )

    args = parser.parse_args()

    config = load_config()
    logger.info("✓ Configuration loaded")

    database_url = get_database_url(config)
    conn = create_connection(database_url)

    try:
        if args.verify:
            logger.info("\n" + "="*80)
            logger.info("VERIFYING SCHEMA")
            logger.info("="*80 + "\n")

            if verify_schema(conn):
                logger.info("\n✓ Schema verification successful")
                sys.exit(0)
            else:
                logger.error("\n✗ Schema verification failed")
                sys.exit(1)

        if args.drop:
            if not drop_schema(conn):
                sys.exit(1)

        if create_schema(conn):
            logger.info("\n" + "="*80)
            logger.info("NEXT STEPS")
            logger.info("="*80)
            logger.info("\n1. Verify the schema:")
            logger.info("   python setup/setup_database.py --verify")
            logger.info("\n2. Create the first administrator:")
            logger.info("   python main.py seed-admin --username admin")
            sys.exit(0)
        else:
            logger.error("\n✗ Schema creation failed")
            sys.exit(1)

    finally:
        conn.close()
        logger.info("\n✓ Database connection closed")


if __name__ == "__main__":
    main()
