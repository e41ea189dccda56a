from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Optional

from sqlmodel import Session, select

from ..core.errors import StateArchivedError
from ..models import StateEntryModel


logger = logging.getLogger(__name__)


def _unix_now() -> int:
    return int(time.time())


class StateRepository:
    """Key-value store with per-entry retention, backed by a SQLModel session.

    Writes are flushed into the session's open transaction and only become
    durable on ``commit()``. Every entry carries a ``live_until`` timestamp;
    reading an entry past that point raises instead of returning ``None`` so
    an expired record is never mistaken for a missing one.
    """

    def __init__(
        self,
        session: Session,
        namespace: str,
        *,
        initial_extent: int,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.session = session
        self.namespace = namespace
        self.initial_extent = initial_extent
        self.clock = clock or _unix_now

    def _entry(self, key: str) -> Optional[StateEntryModel]:
        return self.session.get(StateEntryModel, (self.namespace, key))

    # Key-value operations -----------------------------------------------
    def get(self, key: str) -> Any:
        entry = self._entry(key)
        if entry is None:
            return None
        if entry.live_until < self.clock():
            raise StateArchivedError(
                f"Entry {self.namespace}/{key} expired at {entry.live_until}"
            )
        return json.loads(entry.value)

    def set(self, key: str, value: Any) -> None:
        now = self.clock()
        payload = json.dumps(value, sort_keys=True)
        entry = self._entry(key)
        if entry is None:
            entry = StateEntryModel(
                namespace=self.namespace,
                key=key,
                value=payload,
                live_until=now + self.initial_extent,
                updated_at=now,
            )
        else:
            entry.value = payload
            entry.updated_at = now
        self.session.add(entry)
        self.session.flush()

    # Retention ----------------------------------------------------------
    def extend_lifetime(
        self,
        min_extent: int,
        target_extent: int,
        namespace: Optional[str] = None,
    ) -> int:
        """Push ``live_until`` out to ``now + target_extent`` for every entry
        in the namespace whose remaining lifetime is below ``min_extent``.

        Returns the number of entries that were extended.
        """
        scope = namespace or self.namespace
        now = self.clock()
        stmt = select(StateEntryModel).where(StateEntryModel.namespace == scope)

        extended = 0
        for entry in self.session.exec(stmt):
            if entry.live_until - now < min_extent:
                entry.live_until = now + target_extent
                self.session.add(entry)
                extended += 1

        self.session.flush()
        logger.debug(
            "state.lifetime.extended",
            extra={"namespace": scope, "entries": extended},
        )
        return extended

    def live_until(self, key: str) -> Optional[int]:
        entry = self._entry(key)
        return None if entry is None else entry.live_until

    # Transaction boundary -----------------------------------------------
    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
