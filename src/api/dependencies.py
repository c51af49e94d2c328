"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from datetime import timedelta
from functools import lru_cache

from fastapi import Depends, Request

from src.adapters.smtp.console import ConsoleEmailNotifier
from src.adapters.smtp.mailersend import MailerSendNotifier
from src.config.settings import Settings, get_settings
from src.domain.operations import AuthOperations
from src.domain.ports import AccountStore, EmailNotifier
from src.domain.registration import RegistrationService


def get_store(request: Request) -> AccountStore | None:
    """
    Get the account store from app state.

    The store is created during app lifespan startup and stored in app.state.
    A missing store is reported by the domain as "No DB specified".
    """
    return getattr(request.app.state, "store", None)


@lru_cache
def _build_notifier(
    backend: str, api_key: str, from_email: str, from_name: str, url: str, timeout: float
) -> EmailNotifier:
    if backend == "mailersend":
        return MailerSendNotifier(api_key, from_email, from_name, url=url, timeout=timeout)
    return ConsoleEmailNotifier()


def get_notifier(settings: Settings = Depends(get_settings)) -> EmailNotifier:
    """Get the configured email notifier (one instance per configuration)."""
    return _build_notifier(
        settings.email_backend,
        settings.mailersend_api_key,
        settings.mail_from_email,
        settings.mail_from_name,
        settings.mailersend_url,
        settings.mail_timeout_seconds,
    )


def get_operations(
    store: AccountStore | None = Depends(get_store),
    notifier: EmailNotifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
) -> AuthOperations:
    """
    Create the operation facade with injected dependencies.

    Wires together the store, email notifier and settings for the domain services.
    """
    registration = RegistrationService(
        store=store,
        notifier=notifier,
        secret=settings.token_secret,
        code_length=settings.code_length,
        code_ttl=timedelta(seconds=settings.code_ttl_seconds),
    )
    return AuthOperations.from_registration(registration)
