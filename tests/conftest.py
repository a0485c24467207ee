"""Shared fixtures: fake clock, in-memory storage and a scripted verifier."""

import pytest

from database.appwrite.client import DocumentStoreError
from database.redis.schema import InMemoryKeyValueStore


class FakeClock:
    """Epoch-millisecond clock advanced by hand."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeVerifier:
    """Accepts the codes it was given; can be told to fail like the store."""

    def __init__(self, valid_codes=("SODI2024",), error: Exception | None = None):
        self.valid_codes = set(valid_codes)
        self.error = error
        self.calls: list[str] = []

    async def verify_access_code(self, code: str) -> bool:
        self.calls.append(code)
        if self.error:
            raise self.error
        return code.strip() in self.valid_codes

    async def verify_developer_access_code(self, code_input: str) -> bool:
        parts = code_input.split()
        if len(parts) != 2 or parts[0] != parts[1]:
            return False
        return await self.verify_access_code(parts[0])


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return InMemoryKeyValueStore()


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def failing_verifier():
    return FakeVerifier(error=DocumentStoreError("connection refused"))
