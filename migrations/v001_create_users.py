"""Migration v001: users table."""

from __future__ import annotations

from SchemaLedger.storage.migration import Migration

MIGRATION = Migration(
    version=1,
    description="Create users table",
    sql="""
        CREATE TABLE users (
          id INTEGER PRIMARY KEY,
          email TEXT NOT NULL UNIQUE,
          created_at TEXT NOT NULL
        );

        CREATE INDEX idx_users_created ON users(created_at);
    """,
)
