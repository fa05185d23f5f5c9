"""File-backed store of per-user filter criteria.

The store is loaded once at startup and flushed synchronously after every
mutation. Writes go to a temporary file in the same directory which then
replaces the original, so the file on disk is always a complete JSON object.
"""

import json
import os
import tempfile
from pathlib import Path

import structlog
from pydantic import ValidationError

from walletscreen.core.exceptions import StorageError
from walletscreen.models.criteria import FilterCriteria

log = structlog.get_logger(__name__)


class ConditionStore:
    """Mapping of Telegram user id to FilterCriteria, persisted as JSON.

    Attributes:
        path: Location of the JSON file.

    Example:
        store = ConditionStore(Path("conditions.json"))
        store.load()
        store.set("12345", criteria)
        store.get("12345")
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._conditions: dict[str, FilterCriteria] = {}
        self._loaded = False

    def load(self) -> None:
        """Read the backing file, creating it with ``{}`` if it doesn't exist.

        Raises:
            StorageError: If the file is unreadable or not a JSON object.
        """
        if not self.path.exists():
            log.info("condition_store_initialized", path=str(self.path))
            self._conditions = {}
            self._loaded = True
            self._flush()
            return

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"{self.path}: {e}") from e

        if not isinstance(raw, dict):
            raise StorageError(f"{self.path}: expected a JSON object")

        conditions: dict[str, FilterCriteria] = {}
        for user_id, entry in raw.items():
            try:
                conditions[str(user_id)] = FilterCriteria.model_validate(entry)
            except ValidationError as e:
                log.warning(
                    "condition_entry_invalid",
                    user_id=user_id,
                    errors=e.error_count(),
                )

        self._conditions = conditions
        self._loaded = True
        log.info("condition_store_loaded", path=str(self.path), users=len(conditions))

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def get(self, user_id: str) -> FilterCriteria | None:
        """Return the user's criteria, or None if they never configured any."""
        self._ensure_loaded()
        return self._conditions.get(user_id)

    def set(self, user_id: str, criteria: FilterCriteria) -> None:
        """Store criteria for a user, replacing any previous record, and flush.

        Raises:
            StorageError: If the file cannot be written. The in-memory
                mapping is left unchanged in that case.
        """
        self._ensure_loaded()
        previous = self._conditions.get(user_id)
        self._conditions[user_id] = criteria
        try:
            self._flush()
        except StorageError:
            if previous is None:
                del self._conditions[user_id]
            else:
                self._conditions[user_id] = previous
            raise
        log.info("conditions_saved", user_id=user_id)

    def __contains__(self, user_id: object) -> bool:
        self._ensure_loaded()
        return user_id in self._conditions

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._conditions)

    def _flush(self) -> None:
        payload = {
            user_id: criteria.to_storage()
            for user_id, criteria in self._conditions.items()
        }
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=directory, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(payload, fh, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            log.error("condition_store_write_failed", path=str(self.path), error=str(e))
            raise StorageError(f"{self.path}: {e}") from e
