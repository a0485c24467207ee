"""Access Gate - verifies a shared access code and caches the result for a bounded time."""

import math
import time
from typing import Awaitable, Callable, Optional, Protocol

from pydantic import ValidationError

from config import ACCESS_CODE_EXPIRATION_MS, ACCESS_CODE_STORAGE_KEY
from database.appwrite.client import DocumentStoreError
from database.redis.models import AccessAuthorization
from database.redis.schema import KeyValueStore, StorageError, UndecodableValueError
from logging_config import get_logger
from workflow.debug import print_gate_event
from workflow.models import GateState

logger = get_logger(__name__)

LEGACY_FLAG_VALUE = "true"


class AccessCodeVerifier(Protocol):
    async def verify_access_code(self, code: str) -> bool: ...

    async def verify_developer_access_code(self, code_input: str) -> bool: ...


def _now_ms() -> int:
    return int(time.time() * 1000)


class AccessGate:
    """Gates features behind a shared access code.

    A successful verification is written to the key-value store as
    ``{"verified": true, "timestamp": <epoch ms>}`` and honored until
    ``expiration_ms`` has elapsed. The initial state is read from the store
    when the gate is built; no network call happens until a code is verified.
    """

    def __init__(
        self,
        verifier: AccessCodeVerifier,
        storage: KeyValueStore,
        expiration_ms: int = ACCESS_CODE_EXPIRATION_MS,
        clock: Optional[Callable[[], int]] = None,
        storage_key: str = ACCESS_CODE_STORAGE_KEY,
        accept_legacy_flag: bool = False,
    ):
        """Initialize the gate and restore any cached authorization.

        Args:
            verifier: Looks codes up in the document store
            storage: Key-value store holding the cached authorization
            expiration_ms: Validity window of a verification in milliseconds
            clock: Returns the current time in epoch milliseconds
            storage_key: Key of the cached authorization (default: accessCodeVerified)
            accept_legacy_flag: Honor a raw "true" value written by older clients
        """
        if expiration_ms <= 0:
            raise ValueError(f"expiration_ms must be positive, got {expiration_ms}")

        self.verifier = verifier
        self.storage = storage
        self.expiration_ms = expiration_ms
        self.storage_key = storage_key
        self.accept_legacy_flag = accept_legacy_flag
        self._clock = clock or _now_ms

        self.is_authorized = False
        self._verifications_in_flight = 0
        self.check_stored_authorization()

    @property
    def is_verifying(self) -> bool:
        return self._verifications_in_flight > 0

    @property
    def state(self) -> GateState:
        if self.is_verifying:
            return GateState.VERIFYING
        if self.is_authorized:
            return GateState.AUTHORIZED
        return GateState.UNAUTHENTICATED

    def check_stored_authorization(self) -> bool:
        """Re-read the cached authorization and update ``is_authorized``.

        Corrupted or expired records are deleted. Never raises on bad data;
        an unreachable store leaves the gate unauthorized.

        Returns:
            Whether the gate is authorized after the check
        """
        self.is_authorized = False
        try:
            self.is_authorized = self._restore_authorization()
        except StorageError as e:
            logger.warning(f"Error reading access authorization: {e}")
        return self.is_authorized

    def _restore_authorization(self) -> bool:
        try:
            stored = self.storage.get(self.storage_key)
        except UndecodableValueError:
            self.storage.delete(self.storage_key)
            print_gate_event("corrupted authorization removed", self.state)
            return False
        if stored is None:
            return False

        if self.accept_legacy_flag and stored.strip() == LEGACY_FLAG_VALUE:
            # Older clients stored a bare flag; give it a timestamp so it expires.
            self._store_authorization()
            print_gate_event("legacy flag migrated", GateState.AUTHORIZED)
            return True

        try:
            authorization = AccessAuthorization.model_validate_json(stored)
        except ValidationError:
            self.storage.delete(self.storage_key)
            print_gate_event("corrupted authorization removed", self.state)
            return False

        elapsed = self._clock() - authorization.timestamp
        if authorization.verified and elapsed < self.expiration_ms:
            return True
        self.storage.delete(self.storage_key)
        print_gate_event("expired authorization removed", self.state)
        return False

    async def verify_access_code(self, code: str) -> bool:
        """Verify a code against the document store.

        Args:
            code: Code typed by the user

        Returns:
            True on a match; False on no match, blank input or a store failure
        """
        return await self._verify(code, self.verifier.verify_access_code)

    async def verify_developer_access_code(self, code_input: str) -> bool:
        """Verify a developer code, typed twice separated by a space.

        Args:
            code_input: e.g. "ABC123 ABC123"

        Returns:
            True on a match, False otherwise
        """
        return await self._verify(code_input, self.verifier.verify_developer_access_code)

    async def _verify(self, code: str, lookup: Callable[[str], Awaitable[bool]]) -> bool:
        if not code or not code.strip():
            return False

        self._verifications_in_flight += 1
        try:
            is_valid = await lookup(code)
            if is_valid:
                self._store_authorization()
                self.is_authorized = True
        except (DocumentStoreError, StorageError) as e:
            logger.warning(f"Error verifying access code: {e}")
            return False
        finally:
            self._verifications_in_flight -= 1

        print_gate_event("code accepted" if is_valid else "code rejected", self.state)
        return is_valid

    def reset_authorization(self) -> None:
        """Forget any verification, in memory and in the store."""
        self.is_authorized = False
        try:
            self.storage.delete(self.storage_key)
        except StorageError as e:
            logger.warning(f"Error removing access authorization: {e}")
        print_gate_event("authorization reset", self.state)

    def _store_authorization(self) -> None:
        authorization = AccessAuthorization(verified=True, timestamp=self._clock())
        self.storage.set(self.storage_key, authorization.model_dump_json())


def storage_ttl_seconds(expiration_ms: int) -> int:
    """Seconds an expiring store should keep a record valid for ``expiration_ms``."""
    return max(math.ceil(expiration_ms / 1000), 1)
