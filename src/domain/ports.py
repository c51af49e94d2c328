"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the records the domain exchanges with infrastructure
and the interfaces (ports) that adapters implement.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass
class Account:
    """
    One signup attempt for an email.

    Several unconfirmed rows may coexist for the same email; confirming one
    of them deletes the others, so at most one confirmed row survives.
    """

    id: str
    name: str
    email: str
    email_confirmation_code: str | None
    login_confirmation_code: str | None
    confirmed: bool
    role: str
    prefix: str
    issued_at: datetime


@dataclass(frozen=True)
class OperationResult:
    """Uniform outcome of every public operation."""

    success: bool
    output: str


class AccountStore(Protocol):
    """Port interface for account persistence."""

    def count_confirmed(self, email: str) -> int:
        """Count confirmed rows for a normalized email."""
        ...

    def insert(self, account: Account) -> None:
        """Persist a new account row."""
        ...

    def find_confirmed(self, email: str) -> Account | None:
        """Return the confirmed row for an email, if any."""
        ...

    def find_unconfirmed_by_code(self, email: str, code: str) -> Account | None:
        """Return an unconfirmed row matching email and confirmation code."""
        ...

    def find_by_login_code(self, email: str, code: str) -> Account | None:
        """Return a row matching email and login code."""
        ...

    def confirm(self, account_id: str, code: str) -> bool:
        """
        Mark an account confirmed and clear its confirmation code.

        The update only applies while the row is still unconfirmed and
        still holds ``code``.

        Returns:
            True if the row was updated, False if the code was already consumed
        """
        ...

    def delete_unconfirmed(self, email: str) -> int:
        """
        Delete every unconfirmed row for an email.

        Returns:
            Number of rows deleted
        """
        ...

    def issue_login_code(self, account_id: str, code: str, issued_at: datetime) -> None:
        """Store a fresh login code and its issue time."""
        ...

    def consume_login_code(self, account_id: str, code: str) -> bool:
        """
        Clear the login code if the row still holds ``code``.

        Returns:
            True if the code was cleared, False if it was already consumed
        """
        ...

    def ping(self) -> None:
        """Raise StoreError if the store is unreachable."""
        ...


class EmailNotifier(Protocol):
    """Port interface for email delivery."""

    def send(self, to: str, subject: str, html_body: str) -> None:
        """
        Deliver an HTML email.

        Args:
            to: Recipient email address
            subject: Message subject
            html_body: HTML fragment placed inside the message template

        Raises:
            TransportError: If the message could not be handed to the provider
        """
        ...


class CodeGenerator(Protocol):
    """Port interface for one-time code generation."""

    def generate(self, length: int = 6) -> str:
        """Return ``length`` uppercase letters."""
        ...
