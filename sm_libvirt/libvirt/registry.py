from __future__ import annotations

import logging
from typing import Any, Dict

from .errors import SrAttachedError, SrNotAttachedError

logger = logging.getLogger(__name__)


class AttachedSrRegistry:
    """Maps attached SR identifiers to their libvirt storage pool handles.

    A flat mapping with no locking; callers serialise per-SR requests.
    """

    def __init__(self):
        self._table: Dict[str, Any] = {}

    def get(self, sr: str) -> Any:
        try:
            return self._table[sr]
        except KeyError:
            raise SrNotAttachedError(sr) from None

    def put(self, sr: str, pool: Any) -> None:
        if sr in self._table:
            raise SrAttachedError(sr)
        self._table[sr] = pool
        logger.debug("Registered SR %s (%d attached)", sr, len(self._table))

    def remove(self, sr: str) -> None:
        if sr not in self._table:
            raise SrNotAttachedError(sr)
        del self._table[sr]
        logger.debug("Unregistered SR %s (%d attached)", sr, len(self._table))

    def count(self) -> int:
        return len(self._table)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, sr: object) -> bool:
        return sr in self._table
