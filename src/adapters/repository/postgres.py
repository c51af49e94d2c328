"""
PostgreSQL repository adapter - Implements AccountStore protocol.

This module provides the PostgreSQL implementation of the domain's
account store port using psycopg3 with raw SQL.

Code Consumption
----------------
Codes are consumed with conditional updates that still match on the code
column (``UPDATE ... WHERE id = %s AND <code column> = %s``). The flow
branches on ``rowcount``: when two requests race on the same code, only
one of them sees a row affected.

Every psycopg error is re-raised as the domain's StoreError.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import StoreError
from src.domain.ports import Account

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, name, email, email_confirmation_code, login_confirmation_code,
    confirmed, role, prefix, issued_at
"""


def _to_account(row: tuple) -> Account:
    return Account(
        id=row[0],
        name=row[1],
        email=row[2],
        email_confirmation_code=row[3],
        login_confirmation_code=row[4],
        confirmed=row[5],
        role=row[6],
        prefix=row[7],
        issued_at=row[8],
    )


class PostgresAccountStore:
    """
    Implements AccountStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    @contextmanager
    def _cursor(self) -> Iterator[psycopg.Cursor]:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                yield cursor
                conn.commit()
        except psycopg.Error as e:
            logger.error(f"Account store operation failed: {e}")
            raise StoreError(f"Store error: {e}") from e

    def count_confirmed(self, email: str) -> int:
        sql = "SELECT COUNT(*) FROM accounts WHERE email = %s AND confirmed = TRUE"
        with self._cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()
        return row[0] if row else 0

    def insert(self, account: Account) -> None:
        sql = f"""
            INSERT INTO accounts ({_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        with self._cursor() as cursor:
            cursor.execute(
                sql,
                (
                    account.id,
                    account.name,
                    account.email,
                    account.email_confirmation_code,
                    account.login_confirmation_code,
                    account.confirmed,
                    account.role,
                    account.prefix,
                    account.issued_at,
                ),
            )

    def find_confirmed(self, email: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE email = %s AND confirmed = TRUE LIMIT 1"
        return self._fetch_one(sql, (email,))

    def find_unconfirmed_by_code(self, email: str, code: str) -> Account | None:
        sql = f"""
            SELECT {_COLUMNS} FROM accounts
            WHERE email = %s AND email_confirmation_code = %s AND confirmed = FALSE
            LIMIT 1
        """
        return self._fetch_one(sql, (email, code))

    def find_by_login_code(self, email: str, code: str) -> Account | None:
        sql = f"""
            SELECT {_COLUMNS} FROM accounts
            WHERE email = %s AND login_confirmation_code = %s
            LIMIT 1
        """
        return self._fetch_one(sql, (email, code))

    def confirm(self, account_id: str, code: str) -> bool:
        """
        Confirm an account if it still holds the confirmation code.

        Returns 1 row affected only for the request that consumed the code.
        """
        sql = """
            UPDATE accounts
            SET confirmed = TRUE, email_confirmation_code = NULL
            WHERE id = %s AND email_confirmation_code = %s AND confirmed = FALSE
        """
        with self._cursor() as cursor:
            cursor.execute(sql, (account_id, code))
            return cursor.rowcount == 1

    def delete_unconfirmed(self, email: str) -> int:
        sql = "DELETE FROM accounts WHERE email = %s AND confirmed = FALSE"
        with self._cursor() as cursor:
            cursor.execute(sql, (email,))
            return cursor.rowcount

    def issue_login_code(self, account_id: str, code: str, issued_at: datetime) -> None:
        sql = "UPDATE accounts SET login_confirmation_code = %s, issued_at = %s WHERE id = %s"
        with self._cursor() as cursor:
            cursor.execute(sql, (code, issued_at, account_id))

    def consume_login_code(self, account_id: str, code: str) -> bool:
        sql = """
            UPDATE accounts
            SET login_confirmation_code = NULL
            WHERE id = %s AND login_confirmation_code = %s
        """
        with self._cursor() as cursor:
            cursor.execute(sql, (account_id, code))
            return cursor.rowcount == 1

    def ping(self) -> None:
        with self._cursor() as cursor:
            cursor.execute("SELECT 1")

    def _fetch_one(self, sql: str, params: tuple) -> Account | None:
        with self._cursor() as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
        return _to_account(row) if row is not None else None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
