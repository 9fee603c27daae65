"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from typing import Optional

from db.connection import ConnectionProvider, get_default_provider
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Events table: one row per scheduled event
CREATE TABLE IF NOT EXISTS events (
    event_id            SERIAL PRIMARY KEY,
    event_name          VARCHAR(200) NOT NULL,
    event_date          TIMESTAMP NOT NULL,
    location            VARCHAR(255),
    description         TEXT,
    event_type          VARCHAR(50),
    max_attendees       INT,
    current_attendees   INT DEFAULT 0,
    created_by          VARCHAR(100)
);

-- RSVPs table: one row per (event, user email)
CREATE TABLE IF NOT EXISTS rsvps (
    rsvp_id             SERIAL PRIMARY KEY,
    event_id            INT NOT NULL REFERENCES events(event_id) ON DELETE CASCADE,
    user_name           VARCHAR(100),
    user_email          VARCHAR(255) NOT NULL,
    attendee_count      INT NOT NULL DEFAULT 1 CHECK (attendee_count >= 1),
    UNIQUE(event_id, user_email)
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_events_date ON events(event_date);
CREATE INDEX IF NOT EXISTS idx_events_type ON events(event_type);
CREATE INDEX IF NOT EXISTS idx_rsvps_event ON rsvps(event_id);
"""


def create_tables(provider: Optional[ConnectionProvider] = None) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).

    Raises:
        Exception: Whatever the store raised; schema setup is a startup step
            and failures must stop the caller.
    """
    provider = provider or get_default_provider()
    conn = provider.acquire()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        provider.release(conn)


if __name__ == "__main__":
    from db.connection import close_pool, init_pool
    try:
        create_tables(init_pool())
        logger.info("Database schema created successfully.")
    finally:
        close_pool()
