"""
Unit tests for the AuthOperations boundary.

Tests verify that every outcome becomes an OperationResult and that
store, transport and unexpected faults never escape.
"""

import base64
import logging
from unittest.mock import Mock

import pytest

from src.adapters.repository.memory import InMemoryAccountStore
from src.domain.exceptions import StoreError, TransportError
from src.domain.operations import AuthOperations
from src.domain.ports import OperationResult
from src.domain.registration import RegistrationService

from tests.support import SECRET, FixedClock


class TestScenario:
    """Register, confirm, verify - the happy path end to end."""

    def test_register_confirm_verify(
        self, operations: AuthOperations, store: InMemoryAccountStore
    ) -> None:
        registered = operations.register("Ann", "ann@x.com")
        assert registered == OperationResult(True, "User registered successfully")
        assert store.rows_for("ann@x.com")[0].confirmed is False

        code = store.rows_for("ann@x.com")[0].email_confirmation_code
        confirmed = operations.confirm_registration(code, "ann@x.com")
        assert confirmed.success is True

        assert operations.verify_token(confirmed.output) == OperationResult(
            True, "Token verified"
        )

    def test_login_flow(
        self, operations: AuthOperations, store: InMemoryAccountStore, confirmed_email: str
    ) -> None:
        assert operations.login(confirmed_email) == OperationResult(True, "Login code sent")

        code = store.rows_for(confirmed_email)[0].login_confirmation_code
        finished = operations.finish_login(code, confirmed_email)
        assert finished.success is True
        assert operations.verify_token(finished.output).output == "Token verified"

        again = operations.finish_login(code, confirmed_email)
        assert again == OperationResult(False, "Invalid code/email")

    def test_login_reports_registration(self, operations: AuthOperations) -> None:
        result = operations.login("new@x.com")
        assert result == OperationResult(True, "User registered (instead of login) successfully")


class TestFailures:
    """Domain errors become failed results with their message."""

    def test_validation(self, operations: AuthOperations) -> None:
        assert operations.register("", "ann@x.com") == OperationResult(False, "No name specified")

    def test_duplicate(self, operations: AuthOperations, confirmed_email: str) -> None:
        assert operations.register("Ann", confirmed_email) == OperationResult(
            False, "User already exists"
        )

    def test_not_found(self, operations: AuthOperations) -> None:
        assert operations.confirm_registration("ABCDEF", "ann@x.com") == OperationResult(
            False, "User/code not found"
        )

    def test_expired(
        self, operations: AuthOperations, store: InMemoryAccountStore, clock: FixedClock
    ) -> None:
        operations.register("Ann", "ann@x.com")
        code = store.rows_for("ann@x.com")[0].email_confirmation_code
        clock.advance(minutes=11)

        assert operations.confirm_registration(code, "ann@x.com") == OperationResult(
            False, "Code expired"
        )

    def test_invalid_token(self, operations: AuthOperations) -> None:
        assert operations.verify_token("invalid-jwt") == OperationResult(False, "Token invalid")

    def test_token_with_lone_surrogate(self, operations: AuthOperations) -> None:
        envelope = b'{"payload":{"name":"\\ud800"},"signature":"00"}'
        token = base64.b64encode(envelope).decode()

        assert operations.verify_token(token) == OperationResult(False, "Token invalid")

    def test_missing_store(self) -> None:
        registration = RegistrationService(store=None, notifier=Mock(), secret=SECRET)
        operations = AuthOperations.from_registration(registration)

        assert operations.login("ann@x.com") == OperationResult(False, "No DB specified")


class TestFaults:
    """Infrastructure faults are caught and logged at the boundary."""

    def _operations(self, store, notifier=None) -> AuthOperations:
        registration = RegistrationService(store=store, notifier=notifier or Mock(), secret=SECRET)
        return AuthOperations.from_registration(registration)

    def test_store_error(self, caplog: pytest.LogCaptureFixture) -> None:
        store = Mock()
        store.count_confirmed.side_effect = StoreError("Store error: connection refused")

        with caplog.at_level(logging.ERROR):
            result = self._operations(store).register("Ann", "ann@x.com")

        assert result == OperationResult(False, "Store error: connection refused")
        assert "store error" in caplog.text

    def test_transport_error(self, caplog: pytest.LogCaptureFixture) -> None:
        store = InMemoryAccountStore()
        notifier = Mock()
        notifier.send.side_effect = TransportError("Email delivery failed: timeout")

        with caplog.at_level(logging.WARNING):
            result = self._operations(store, notifier).register("Ann", "ann@x.com")

        assert result == OperationResult(False, "Email delivery failed: timeout")
        assert "email delivery failed" in caplog.text
        assert len(store.rows_for("ann@x.com")) == 1

    def test_unexpected_error(self, caplog: pytest.LogCaptureFixture) -> None:
        store = Mock()
        store.find_by_login_code.side_effect = RuntimeError("boom")

        with caplog.at_level(logging.ERROR):
            result = self._operations(store).finish_login("ABCDEF", "ann@x.com")

        assert result == OperationResult(False, "An error occurred during login confirmation")
        assert "boom" in caplog.text

    def test_unexpected_error_during_verification(
        self, operations: AuthOperations, caplog: pytest.LogCaptureFixture
    ) -> None:
        operations.login_service = Mock()
        operations.login_service.verify_token.side_effect = RuntimeError("boom")

        with caplog.at_level(logging.ERROR):
            result = operations.verify_token("abc")

        assert result == OperationResult(False, "Token invalid")
        assert "boom" in caplog.text
