"""
Optimistic local updates with compensating rollback.

A command snapshots the keys it is about to change, applies the new values
to the view's local state immediately, then issues the remote write. If
the write fails, the snapshot is restored before the failure is returned
to the caller, so a view never shows an unconfirmed value as success.
"""

import logging
from typing import Any, Callable, Dict, Mapping, MutableMapping, Optional

from haven.services.base import ServiceResult

logger = logging.getLogger(__name__)

_ABSENT = object()


class OptimisticCommand:
    """
    One optimistic write.

    Args:
        state: The view's local state (mutated in place)
        changes: Keys and values to show immediately
        remote: Issues the real write and returns its ServiceResult
    """

    def __init__(
        self,
        state: MutableMapping[str, Any],
        changes: Mapping[str, Any],
        remote: Callable[[], ServiceResult],
    ):
        self.state = state
        self.changes = dict(changes)
        self.remote = remote
        self._snapshot: Optional[Dict[str, Any]] = None
        self.result: Optional[ServiceResult] = None

    @property
    def rolled_back(self) -> bool:
        return self.result is not None and not self.result.is_success

    def apply(self) -> None:
        self._snapshot = {key: self.state.get(key, _ABSENT) for key in self.changes}
        self.state.update(self.changes)

    def rollback(self) -> None:
        if self._snapshot is None:
            return
        for key, value in self._snapshot.items():
            if value is _ABSENT:
                self.state.pop(key, None)
            else:
                self.state[key] = value
        logger.info(f"Rolled back optimistic update of {len(self._snapshot)} key(s)")
        self._snapshot = None

    def execute(self) -> ServiceResult:
        self.apply()
        try:
            self.result = self.remote()
        except Exception:
            self.rollback()
            raise

        if not self.result.is_success:
            self.rollback()
        else:
            self._snapshot = None
        return self.result
