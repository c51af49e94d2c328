"""
In-memory repository adapter - Implements AccountStore protocol.

Keeps rows in a dict guarded by a lock. Used by the test suite and for
running the API without PostgreSQL (STORAGE_BACKEND=memory).
"""

import threading
from dataclasses import replace
from datetime import datetime

from src.domain.ports import Account


class InMemoryAccountStore:
    """
    Implements AccountStore protocol with a process-local dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Returned accounts are copies; mutate rows only through the store.
    """

    def __init__(self) -> None:
        self._rows: dict[str, Account] = {}
        self._lock = threading.Lock()

    def rows_for(self, email: str) -> list[Account]:
        """All rows for an email, in insertion order."""
        with self._lock:
            return [replace(row) for row in self._rows.values() if row.email == email]

    def count_confirmed(self, email: str) -> int:
        with self._lock:
            return sum(1 for row in self._rows.values() if row.email == email and row.confirmed)

    def insert(self, account: Account) -> None:
        with self._lock:
            if account.id in self._rows:
                raise ValueError(f"duplicate account id {account.id}")
            self._rows[account.id] = replace(account)

    def find_confirmed(self, email: str) -> Account | None:
        return self._first(lambda row: row.email == email and row.confirmed)

    def find_unconfirmed_by_code(self, email: str, code: str) -> Account | None:
        return self._first(
            lambda row: row.email == email
            and row.email_confirmation_code == code
            and not row.confirmed
        )

    def find_by_login_code(self, email: str, code: str) -> Account | None:
        return self._first(lambda row: row.email == email and row.login_confirmation_code == code)

    def confirm(self, account_id: str, code: str) -> bool:
        with self._lock:
            row = self._rows.get(account_id)
            if row is None or row.confirmed or row.email_confirmation_code != code:
                return False
            row.confirmed = True
            row.email_confirmation_code = None
            return True

    def delete_unconfirmed(self, email: str) -> int:
        with self._lock:
            doomed = [
                key for key, row in self._rows.items() if row.email == email and not row.confirmed
            ]
            for key in doomed:
                del self._rows[key]
            return len(doomed)

    def issue_login_code(self, account_id: str, code: str, issued_at: datetime) -> None:
        with self._lock:
            row = self._rows.get(account_id)
            if row is not None:
                row.login_confirmation_code = code
                row.issued_at = issued_at

    def consume_login_code(self, account_id: str, code: str) -> bool:
        with self._lock:
            row = self._rows.get(account_id)
            if row is None or row.login_confirmation_code != code:
                return False
            row.login_confirmation_code = None
            return True

    def ping(self) -> None:
        return None

    def _first(self, predicate) -> Account | None:
        with self._lock:
            for row in self._rows.values():
                if predicate(row):
                    return replace(row)
        return None
