"""Migration v002: posts table, seeded with a welcome post per existing user."""

from __future__ import annotations

from SchemaLedger.storage.migration import Migration
from SchemaLedger.storage.transaction import Transaction


def _apply(tx: Transaction) -> None:
    tx.execute(
        """
        CREATE TABLE posts (
          id INTEGER PRIMARY KEY,
          user_id INTEGER NOT NULL REFERENCES users(id),
          title TEXT NOT NULL
        )
        """
    )
    mark = tx.placeholders(1)[0]
    user_ids = [row[0] for row in tx.execute("SELECT id FROM users").fetchall()]
    for user_id in user_ids:
        tx.execute(f"INSERT INTO posts (user_id, title) VALUES ({mark}, 'Welcome')", (user_id,))


MIGRATION = Migration(version=2, description="Create posts table", apply=_apply)
