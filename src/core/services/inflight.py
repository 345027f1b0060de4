"""Control de peticiones en curso por acción.

Un segundo envío de la misma acción mientras el primero sigue esperando al
servidor se rechaza con `DuplicateRequestError` y no llega a la red.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator

from core.domain.errors import DuplicateRequestError

logger = logging.getLogger(__name__)


class InFlightGuard:
    def __init__(self) -> None:
        self._pending: set[str] = set()

    def is_pending(self, action: str) -> bool:
        return action in self._pending

    @property
    def pending(self) -> frozenset[str]:
        return frozenset(self._pending)

    @contextlib.asynccontextmanager
    async def claim(self, action: str) -> AsyncIterator[None]:
        if action in self._pending:
            logger.info("Rejected duplicate submission: %s", action)
            raise DuplicateRequestError(action)
        self._pending.add(action)
        try:
            yield
        finally:
            self._pending.discard(action)
