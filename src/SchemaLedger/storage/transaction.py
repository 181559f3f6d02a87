"""Transactional wrapper used for every unit of migration work."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Sequence

from SchemaLedger.storage.dialects import Dialect


class Transaction:
    """Handle passed to migration bodies.

    Statements run on a single cursor of the wrapped connection. The handle
    never commits or rolls back; :func:`transaction` owns that.
    """

    def __init__(self, conn: Any, dialect: Dialect) -> None:
        self.connection = conn
        self.dialect = dialect
        self._cursor = conn.cursor()

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> Any:
        """Execute one statement and return the cursor.

        Args:
            sql: A single SQL statement.
            params: Positional parameters, written with :meth:`placeholders`.

        Returns:
            The DB-API cursor, ready for ``fetchone``/``fetchall``.
        """
        if params is None:
            self._cursor.execute(sql)
        else:
            self._cursor.execute(sql, tuple(params))
        return self._cursor

    def placeholders(self, count: int) -> list[str]:
        """Return ``count`` parameter markers in the driver's style."""
        return self.dialect.placeholders(count)

    def close(self) -> None:
        self._cursor.close()


@contextmanager
def transaction(conn: Any, dialect: Dialect) -> Iterator[Transaction]:
    """Run a block inside one database transaction.

    Commits when the block exits normally. Rolls back and re-raises when the
    block raises, and also when the commit itself fails.

    On explicit-begin dialects (sqlite) the transaction is driven with SQL
    ``BEGIN``/``COMMIT``/``ROLLBACK`` so the outcome does not depend on the
    connection's transaction mode. ``BEGIN`` is skipped when the connection
    already has a transaction open, which then ends with this block.

    Args:
        conn: Open DB-API connection.
        dialect: Dialect of ``conn``.

    Yields:
        Transaction handle bound to ``conn``.
    """
    tx = Transaction(conn, dialect)
    try:
        if dialect.explicit_begin and not conn.in_transaction:
            tx.execute("BEGIN")
        try:
            yield tx
            _finish(tx, "COMMIT")
        except BaseException:
            _finish(tx, "ROLLBACK")
            raise
    finally:
        tx.close()


def _finish(tx: Transaction, statement: str) -> None:
    conn = tx.connection
    if not tx.dialect.explicit_begin:
        if statement == "COMMIT":
            conn.commit()
        else:
            conn.rollback()
    elif conn.in_transaction:
        tx.execute(statement)
