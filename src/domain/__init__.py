"""
Domain layer - Pure business logic with zero framework imports.

This package contains the OTP issuance/expiry state machine, the keyed
digest and the token codec. It defines its own port interfaces for
infrastructure abstraction, ensuring true hexagonal architecture decoupling.
"""

from .codes import SecretsCodeGenerator
from .digest import current_epoch, keyed_digest
from .exceptions import (
    AuthError,
    DuplicateAccount,
    Expired,
    InvalidCredential,
    NotFound,
    StoreError,
    TransportError,
    ValidationError,
)
from .login import LoginService
from .operations import AuthOperations
from .ports import Account, AccountStore, CodeGenerator, EmailNotifier, OperationResult
from .registration import RegistrationService
from .tokens import make_token, open_token

__all__ = [
    "Account",
    "AccountStore",
    "AuthError",
    "AuthOperations",
    "CodeGenerator",
    "DuplicateAccount",
    "EmailNotifier",
    "Expired",
    "InvalidCredential",
    "LoginService",
    "NotFound",
    "OperationResult",
    "RegistrationService",
    "SecretsCodeGenerator",
    "StoreError",
    "TransportError",
    "ValidationError",
    "current_epoch",
    "keyed_digest",
    "make_token",
    "open_token",
]
