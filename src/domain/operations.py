"""
Operation boundary - uniform results for every public operation.

Domain services raise AuthError subclasses; this layer catches them and
returns OperationResult(success=False, output=<message>). Unexpected
exceptions are logged with their traceback and reported generically, so
nothing escapes to the transport layer.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .exceptions import AuthError, StoreError, TransportError
from .login import LoginService
from .ports import OperationResult
from .registration import RegistrationService

logger = logging.getLogger(__name__)

TOKEN_VERIFIED = "Token verified"
TOKEN_INVALID = "Token invalid"


@dataclass
class AuthOperations:
    """Facade exposing register, confirm, login, finish-login and verify."""

    registration: RegistrationService
    login_service: LoginService

    @classmethod
    def from_registration(cls, registration: RegistrationService) -> "AuthOperations":
        return cls(registration=registration, login_service=LoginService(registration))

    def register(self, name: str, email: str, do_send: bool = True) -> OperationResult:
        return self._run(
            "registration", lambda: self.registration.register(name, email, do_send)
        )

    def confirm_registration(self, code: str, email: str) -> OperationResult:
        return self._run(
            "registration confirmation",
            lambda: self.registration.confirm_registration(code, email),
        )

    def login(self, email: str, do_send: bool = True) -> OperationResult:
        return self._run("login", lambda: self.login_service.login(email, do_send))

    def finish_login(self, code: str, email: str) -> OperationResult:
        return self._run(
            "login confirmation", lambda: self.login_service.finish_login(code, email)
        )

    def verify_token(self, token: str) -> OperationResult:
        """Report only whether the token verified, never why it did not."""
        try:
            verified = self.login_service.verify_token(token)
        except Exception:
            logger.exception("Unexpected error during token verification")
            verified = False
        if verified:
            return OperationResult(success=True, output=TOKEN_VERIFIED)
        return OperationResult(success=False, output=TOKEN_INVALID)

    def _run(self, operation: str, action: Callable[[], str]) -> OperationResult:
        try:
            return OperationResult(success=True, output=action())
        except StoreError as e:
            logger.error(f"{operation} failed: store error: {e}")
            return OperationResult(success=False, output=str(e))
        except TransportError as e:
            logger.warning(f"{operation}: email delivery failed: {e}")
            return OperationResult(success=False, output=str(e))
        except AuthError as e:
            return OperationResult(success=False, output=str(e))
        except Exception:
            logger.exception(f"Unexpected error during {operation}")
            return OperationResult(
                success=False, output=f"An error occurred during {operation}"
            )
