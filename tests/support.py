"""Test doubles shared by the unit and integration suites."""

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from src.domain.codes import SecretsCodeGenerator

SECRET = "test-secret"
START = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class ScriptedCodeGenerator:
    """Returns queued codes first, then falls back to random ones."""

    def __init__(self, codes: Iterable[str] = ()) -> None:
        self._queue = list(codes)
        self._fallback = SecretsCodeGenerator()

    def queue(self, *codes: str) -> None:
        self._queue.extend(codes)

    def generate(self, length: int = 6) -> str:
        if self._queue:
            return self._queue.pop(0)
        return self._fallback.generate(length)
