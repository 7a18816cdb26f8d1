"""API key issuance and validation."""

import logging
import secrets
from concurrent.futures import Executor, ThreadPoolExecutor

from common.exceptions import DuplicateRecordError, KeyCollisionError
from database.models import ApiKey
from database.RecordStore import RecordStore

logger = logging.getLogger("cellid")

KEY_PREFIX = "cellid"
KEY_ENTROPY_BYTES = 16  # 32 hex characters


class ApiKeyService:
    """Mints opaque tokens and checks presented ones against the store.

    Usage timestamps are written from a background executor so validation
    never waits on, or fails because of, that write.
    """

    def __init__(self, store: RecordStore, executor: Executor | None = None) -> None:
        """Initialize the service.

        Args:
            store: Record store holding the ``api_keys`` table.
            executor: Runs ``last_used_at`` updates. A single-worker thread
                pool is created (and owned) when omitted.
        """
        self._store = store
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="apikey-usage"
        )

    @staticmethod
    def new_token() -> str:
        return f"{KEY_PREFIX}_{secrets.token_hex(KEY_ENTROPY_BYTES)}"

    def generate(self) -> ApiKey:
        """Create and persist a new active key.

        Raises:
            KeyCollisionError: If the token already existed. Callers may retry.
        """
        try:
            api_key = self._store.insert_api_key(self.new_token(), is_active=True)
        except DuplicateRecordError as e:
            logger.warning("event=api_key_collision")
            raise KeyCollisionError("Generated API key collided with an existing key") from e
        logger.info("event=api_key_generated id=%s", api_key.id)
        return api_key

    def validate(self, key: str | None) -> bool:
        """Return True iff ``key`` exists and is active.

        Unknown, inactive and empty keys return False. On success the usage
        timestamp update is dispatched without being awaited.
        """
        if not key:
            return False

        api_key = self._store.find_api_key(key)
        if api_key is None or not api_key.is_active:
            return False

        try:
            self._executor.submit(self._record_usage, api_key.id)
        except RuntimeError:
            # Executor already shut down; usage tracking is best-effort.
            logger.warning("Skipped key usage update (key_id=%s): executor closed", api_key.id)
        return True

    def deactivate(self, key: str) -> bool:
        """Revoke a key. Returns False if no such key exists."""
        changed = self._store.set_api_key_active(key, False)
        if changed:
            logger.info("event=api_key_deactivated")
        return changed

    def activate(self, key: str) -> bool:
        return self._store.set_api_key_active(key, True)

    def close(self) -> None:
        """Wait for pending usage updates and release the executor."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def _record_usage(self, key_id: int) -> None:
        try:
            self._store.touch_api_key(key_id)
        except Exception:
            logger.exception("Failed to update key usage (key_id=%s)", key_id)
