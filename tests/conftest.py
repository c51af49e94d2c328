"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock and scripted code generator
- In-memory account store and mocked email notifier
- Wired domain services
"""

from unittest.mock import Mock

import pytest

from src.adapters.repository.memory import InMemoryAccountStore
from src.domain.login import LoginService
from src.domain.operations import AuthOperations
from src.domain.registration import RegistrationService
from tests.support import SECRET, FixedClock, ScriptedCodeGenerator


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def codes() -> ScriptedCodeGenerator:
    return ScriptedCodeGenerator()


@pytest.fixture
def store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def notifier() -> Mock:
    return Mock()


@pytest.fixture
def registration(
    store: InMemoryAccountStore, notifier: Mock, codes: ScriptedCodeGenerator, clock: FixedClock
) -> RegistrationService:
    return RegistrationService(
        store=store,
        notifier=notifier,
        secret=SECRET,
        code_generator=codes,
        clock=clock,
    )


@pytest.fixture
def login_service(registration: RegistrationService) -> LoginService:
    return LoginService(registration)


@pytest.fixture
def operations(registration: RegistrationService) -> AuthOperations:
    return AuthOperations.from_registration(registration)


@pytest.fixture
def confirmed_email(registration: RegistrationService, store: InMemoryAccountStore) -> str:
    """Register and confirm ann@x.com, returning the email."""
    email = "ann@x.com"
    registration.register("Ann", email, do_send=False)
    code = store.rows_for(email)[0].email_confirmation_code
    registration.confirm_registration(code, email)
    return email
