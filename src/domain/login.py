"""
Login domain service - passwordless login with emailed codes.

An email without a confirmed account is treated as a first-time signup:
login() falls back to RegistrationService.register() with the local part
of the address as the display name.
"""

import html
from dataclasses import dataclass

from .digest import current_epoch
from .exceptions import InvalidCredential, ValidationError
from .registration import RegistrationService, ensure_fresh, normalize_code, normalize_email
from .tokens import build_payload, make_token, open_token

LOGIN_SUBJECT = "Login"
LOGIN_CODE_SENT = "Login code sent"
REGISTERED_INSTEAD = "User registered (instead of login) successfully"


@dataclass
class LoginService:
    """Domain service for login and token verification."""

    registration: RegistrationService

    def login(self, email: str, do_send: bool = True) -> str:
        """
        Issue a fresh login code for a confirmed account.

        Args:
            email: Email address (will be normalized)
            do_send: Whether to email the login code

        Returns:
            "Login code sent", or the registration-in-place-of-login message
            when the email has no confirmed account

        Raises:
            ValidationError: If the store or email is missing
            TransportError: If the email could not be sent (the code is kept)
        """
        reg = self.registration
        store = reg.require_store()
        email = normalize_email(email or "")
        if not email:
            raise ValidationError("No email specified")

        account = store.find_confirmed(email)
        if account is None:
            reg.register(email.split("@")[0], email, do_send)
            return REGISTERED_INSTEAD

        code = reg.code_generator.generate(reg.code_length)
        store.issue_login_code(account.id, code, reg.clock())

        if do_send:
            reg.notifier.send(
                email,
                LOGIN_SUBJECT,
                f"<h2>Dear {html.escape(account.name)},</h2>"
                f"<p>Login using this code: <b>{code}</b></p>",
            )
        return LOGIN_CODE_SENT

    def finish_login(self, code: str, email: str) -> str:
        """
        Exchange a login code for a signed token.

        Raises:
            ValidationError: If the store, code or email is missing
            InvalidCredential: If no row holds the email/code pair
            Expired: If the code is older than the validity window
        """
        reg = self.registration
        store = reg.require_store()
        code = normalize_code(code or "")
        if not code:
            raise ValidationError("No code specified")
        email = normalize_email(email or "")
        if not email:
            raise ValidationError("No email specified")

        account = store.find_by_login_code(email, code)
        if account is None:
            raise InvalidCredential("Invalid code/email")

        now = reg.clock()
        ensure_fresh(account, now, reg.code_ttl)
        token = make_token(build_payload(account), reg.secret, current_epoch(now))

        if not store.consume_login_code(account.id, code):
            raise InvalidCredential("Invalid code/email")
        return token

    def verify_token(self, token: str) -> bool:
        """True if the token was signed with our secret during this month."""
        reg = self.registration
        if not token:
            return False
        return open_token(token, reg.secret, current_epoch(reg.clock())) is not None
