"""Tests for the access gate."""

import asyncio
import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from config import ACCESS_CODE_STORAGE_KEY
from database.redis.schema import RedisKeyValueStore
from workflow.access_gate import AccessGate, storage_ttl_seconds
from workflow.models import GateState

KEY = ACCESS_CODE_STORAGE_KEY
WINDOW = 1000


def _stored(storage):
    raw = storage.get(KEY)
    return json.loads(raw) if raw is not None else None


def _gate(verifier, storage, clock, **kwargs):
    return AccessGate(verifier, storage, expiration_ms=WINDOW, clock=clock, **kwargs)


def test_initial_state_without_record(verifier, storage, clock):
    """A fresh gate with nothing stored is unauthenticated."""
    gate = _gate(verifier, storage, clock)
    assert gate.is_authorized is False
    assert gate.state == GateState.UNAUTHENTICATED
    assert verifier.calls == []


def test_rejects_non_positive_window(verifier, storage, clock):
    with pytest.raises(ValueError):
        AccessGate(verifier, storage, expiration_ms=0, clock=clock)


@pytest.mark.asyncio
async def test_verify_success_persists_record(verifier, storage, clock):
    """A matching code authorizes the gate and stores a fresh timestamp."""
    gate = _gate(verifier, storage, clock)

    assert await gate.verify_access_code("SODI2024") is True
    assert gate.is_authorized is True
    assert gate.state == GateState.AUTHORIZED
    assert _stored(storage) == {"verified": True, "timestamp": clock.now}


@pytest.mark.asyncio
async def test_verify_no_match_keeps_state(verifier, storage, clock):
    gate = _gate(verifier, storage, clock)

    assert await gate.verify_access_code("WRONG") is False
    assert gate.is_authorized is False
    assert storage.get(KEY) is None
    assert verifier.calls == ["WRONG"]


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["", "   ", "\t\n"])
async def test_blank_code_short_circuits(verifier, storage, clock, code):
    """Blank input returns False without contacting the store."""
    gate = _gate(verifier, storage, clock)

    assert await gate.verify_access_code(code) is False
    assert verifier.calls == []


@pytest.mark.asyncio
async def test_store_failure_resolves_to_denied(failing_verifier, storage, clock):
    """Backend errors are swallowed and reported as a failed verification."""
    gate = _gate(failing_verifier, storage, clock)

    assert await gate.verify_access_code("SODI2024") is False
    assert gate.is_authorized is False
    assert gate.is_verifying is False
    assert storage.get(KEY) is None


@pytest.mark.asyncio
async def test_is_verifying_while_lookup_in_flight(storage, clock):
    seen = []

    class SlowVerifier:
        async def verify_access_code(self, code):
            seen.append(gate.state)
            return True

        async def verify_developer_access_code(self, code_input):
            return False

    gate = _gate(SlowVerifier(), storage, clock)
    assert await gate.verify_access_code("SODI2024") is True
    assert seen == [GateState.VERIFYING]
    assert gate.state == GateState.AUTHORIZED


@pytest.mark.asyncio
async def test_expiration_scenario(verifier, storage, clock):
    """Window 1000ms: verified at t=0, authorized at t=500, expired at t=1500."""
    gate = _gate(verifier, storage, clock)
    assert await gate.verify_access_code("SODI2024") is True

    clock.advance(500)
    assert _gate(verifier, storage, clock).is_authorized is True

    clock.advance(1000)
    fresh = _gate(verifier, storage, clock)
    assert fresh.is_authorized is False
    assert storage.get(KEY) is None


@pytest.mark.parametrize("elapsed, authorized", [(0, True), (999, True), (1000, False), (5000, False)])
def test_expiration_boundary(verifier, storage, clock, elapsed, authorized):
    storage.set(KEY, json.dumps({"verified": True, "timestamp": clock.now - elapsed}))

    gate = _gate(verifier, storage, clock)

    assert gate.is_authorized is authorized
    assert (storage.get(KEY) is not None) is authorized


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        "null",
        "[]",
        '{"verified": true}',
        '{"timestamp": 1}',
        '{"verified": "yes", "timestamp": 1}',
        "true",
    ],
)
def test_malformed_record_is_deleted(verifier, storage, clock, raw):
    """Corrupted records are removed and never raise."""
    storage.set(KEY, raw)

    gate = _gate(verifier, storage, clock)

    assert gate.is_authorized is False
    assert storage.get(KEY) is None


def test_unverified_record_is_deleted(verifier, storage, clock):
    storage.set(KEY, json.dumps({"verified": False, "timestamp": clock.now}))

    gate = _gate(verifier, storage, clock)

    assert gate.is_authorized is False
    assert storage.get(KEY) is None


def test_legacy_flag_is_migrated_when_accepted(verifier, storage, clock):
    """The old bare "true" flag is honored and rewritten with a timestamp."""
    storage.set(KEY, "true")

    gate = _gate(verifier, storage, clock, accept_legacy_flag=True)

    assert gate.is_authorized is True
    assert _stored(storage) == {"verified": True, "timestamp": clock.now}

    clock.advance(WINDOW)
    assert gate.check_stored_authorization() is False


@pytest.mark.asyncio
async def test_reset_authorization(verifier, storage, clock):
    gate = _gate(verifier, storage, clock)
    await gate.verify_access_code("SODI2024")

    gate.reset_authorization()

    assert gate.is_authorized is False
    assert storage.get(KEY) is None


def test_reset_without_prior_state(verifier, storage, clock):
    gate = _gate(verifier, storage, clock)
    gate.reset_authorization()
    assert gate.is_authorized is False
    assert storage.get(KEY) is None


@pytest.mark.asyncio
async def test_check_detects_expiry_on_live_gate(verifier, storage, clock):
    gate = _gate(verifier, storage, clock)
    await gate.verify_access_code("SODI2024")

    clock.advance(WINDOW + 1)

    assert gate.check_stored_authorization() is False
    assert gate.state == GateState.UNAUTHENTICATED
    assert storage.get(KEY) is None


@pytest.mark.asyncio
async def test_developer_code_format(verifier, storage, clock):
    gate = _gate(verifier, storage, clock)

    assert await gate.verify_developer_access_code("SODI2024") is False
    assert await gate.verify_developer_access_code("SODI2024 OTHER") is False
    assert verifier.calls == []

    assert await gate.verify_developer_access_code("SODI2024 SODI2024") is True
    assert gate.is_authorized is True


class UnreliableRedis:
    """Redis stand-in that can fail on reads or writes."""

    def __init__(self, data=None, fail_get=False, fail_set=False, decode_error=False):
        self.data = dict(data or {})
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.decode_error = decode_error

    def get(self, key):
        if self.fail_get:
            raise RedisConnectionError("Connection refused")
        if self.decode_error and key in self.data:
            # What a decode_responses=True client raises on binary values.
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        return self.data.get(key)

    def set(self, key, value, ex=None):
        if self.fail_set:
            raise RedisConnectionError("Connection refused")
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)


@pytest.mark.asyncio
async def test_write_failure_resolves_to_denied(verifier, clock):
    """A matching code whose authorization cannot be saved is denied."""
    redis_client = UnreliableRedis(fail_set=True)
    gate = _gate(verifier, RedisKeyValueStore(redis_client), clock)

    assert await gate.verify_access_code("SODI2024") is False
    assert gate.is_authorized is False
    assert gate.state == GateState.UNAUTHENTICATED
    assert redis_client.data == {}


def test_read_failure_leaves_gate_unauthorized(verifier, clock):
    gate = _gate(verifier, RedisKeyValueStore(UnreliableRedis(fail_get=True)), clock)

    assert gate.is_authorized is False
    assert gate.check_stored_authorization() is False


def test_undecodable_bytes_are_deleted(verifier, clock):
    """Binary garbage under the key is removed like any corrupted record."""
    redis_client = UnreliableRedis({f"crm:gate:{KEY}": b"\xff\xfe garbage"})

    gate = _gate(verifier, RedisKeyValueStore(redis_client), clock)

    assert gate.is_authorized is False
    assert redis_client.data == {}


def test_undecodable_response_is_deleted(verifier, clock):
    redis_client = UnreliableRedis({f"crm:gate:{KEY}": "garbage"}, decode_error=True)

    gate = _gate(verifier, RedisKeyValueStore(redis_client), clock)

    assert gate.is_authorized is False
    assert redis_client.data == {}


@pytest.mark.asyncio
async def test_overlapping_verifications_stay_verifying(storage, clock):
    """A fast lookup finishing first does not clear the verifying state of a slow one."""
    release = asyncio.Event()

    class MixedVerifier:
        async def verify_access_code(self, code):
            if code == "SLOW":
                await release.wait()
                return True
            return False

        async def verify_developer_access_code(self, code_input):
            return False

    gate = _gate(MixedVerifier(), storage, clock)
    slow = asyncio.create_task(gate.verify_access_code("SLOW"))
    await asyncio.sleep(0)

    assert await gate.verify_access_code("FAST") is False
    assert gate.state == GateState.VERIFYING

    release.set()
    assert await slow is True
    assert gate.state == GateState.AUTHORIZED


@pytest.mark.parametrize("expiration_ms, seconds", [(86_400_000, 86_400), (1500, 2), (1, 1)])
def test_storage_ttl_seconds(expiration_ms, seconds):
    assert storage_ttl_seconds(expiration_ms) == seconds
