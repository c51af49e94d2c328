"""
Registration domain service - signup state machine.

States per email
================

    NoAccount -> Unconfirmed(code, issued_at) -> Confirmed

- register() inserts a new unconfirmed row every time it is called, as long
  as no confirmed row exists for the email. Abandoned attempts pile up as
  extra unconfirmed rows.
- confirm_registration() confirms the row holding the submitted code and
  deletes every other unconfirmed row for the email, which leaves exactly
  one (confirmed) row behind.

The confirmation step is a conditional update on the code column, so two
concurrent confirmations of the same code cannot both succeed. The token is
signed before that update, so a signing failure leaves the code usable.
"""

import html
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .codes import SecretsCodeGenerator
from .digest import current_epoch
from .exceptions import DuplicateAccount, Expired, NotFound, ValidationError
from .ports import Account, AccountStore, CodeGenerator, EmailNotifier
from .tokens import build_payload, make_token

CODE_TTL = timedelta(minutes=10)
ID_LENGTH = 30
DEFAULT_ROLE = "user"

REGISTER_SUBJECT = "Verify your account"
REGISTERED = "User registered successfully"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    """Strip whitespace and lowercase."""
    return email.strip().lower()


def normalize_code(code: str) -> str:
    """Strip whitespace and uppercase."""
    return code.strip().upper()


def ensure_fresh(account: Account, now: datetime, ttl: timedelta) -> None:
    """
    Reject codes issued more than ``ttl`` ago.

    Raises:
        Expired: If ``now - issued_at > ttl``
    """
    if now - account.issued_at > ttl:
        raise Expired("Code expired")


@dataclass
class RegistrationService:
    """
    Domain service for signup.

    Orchestrates code generation, row insertion, confirmation email
    delivery and token issuance after confirmation.
    """

    store: AccountStore | None
    notifier: EmailNotifier
    secret: str
    code_generator: CodeGenerator = field(default_factory=SecretsCodeGenerator)
    clock: Callable[[], datetime] = utcnow
    code_length: int = 6
    code_ttl: timedelta = CODE_TTL

    def register(self, name: str, email: str, do_send: bool = True) -> str:
        """
        Start a signup by inserting an unconfirmed account.

        Args:
            name: Display name
            email: Email address (will be normalized)
            do_send: Whether to email the confirmation code

        Returns:
            Success message

        Raises:
            ValidationError: If the store, name or email is missing
            DuplicateAccount: If the email already has a confirmed account
            TransportError: If the email could not be sent (the row is kept)
        """
        store = self.require_store()
        if not name:
            raise ValidationError("No name specified")
        email = normalize_email(email or "")
        if not email:
            raise ValidationError("No email specified")

        if store.count_confirmed(email) > 0:
            raise DuplicateAccount("User already exists")

        account_id = self.code_generator.generate(ID_LENGTH)
        account = Account(
            id=account_id,
            name=name,
            email=email,
            email_confirmation_code=self.code_generator.generate(self.code_length),
            login_confirmation_code=self.code_generator.generate(self.code_length),
            confirmed=False,
            role=DEFAULT_ROLE,
            prefix="P" + account_id,
            issued_at=self.clock(),
        )
        store.insert(account)

        if do_send:
            self.notifier.send(
                email,
                REGISTER_SUBJECT,
                f"<h2>Dear {html.escape(name)},</h2>"
                f"<p>Verify your account using this code: <b>{account.email_confirmation_code}</b></p>",
            )
        return REGISTERED

    def confirm_registration(self, code: str, email: str) -> str:
        """
        Confirm a signup with the emailed code.

        Args:
            code: Email-confirmation code (case-insensitive)
            email: Email address (will be normalized)

        Returns:
            Signed token for the confirmed account

        Raises:
            ValidationError: If the store, code or email is missing
            NotFound: If no unconfirmed row holds the code
            Expired: If the code is older than the validity window
        """
        store = self.require_store()
        code = normalize_code(code or "")
        if not code:
            raise ValidationError("No code specified")
        email = normalize_email(email or "")
        if not email:
            raise ValidationError("No email specified")

        account = store.find_unconfirmed_by_code(email, code)
        if account is None:
            raise NotFound("User/code not found")

        now = self.clock()
        ensure_fresh(account, now, self.code_ttl)
        token = make_token(build_payload(account), self.secret, current_epoch(now))

        if not store.confirm(account.id, code):
            raise NotFound("User/code not found")
        store.delete_unconfirmed(email)
        return token

    def require_store(self) -> AccountStore:
        if self.store is None:
            raise ValidationError("No DB specified")
        return self.store
