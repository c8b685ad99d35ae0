"""Lazy, advisory bank initialization."""
from __future__ import annotations

import structlog

from infrastructure.db.hindsight_client import HindsightClient

logger = structlog.get_logger(__name__)


class BankLifecycle:
    """Ensure the configured bank exists before the first memory operation.

    The ready flag only moves from False to True. Two concurrent first calls
    may both ensure; the remote ensure is idempotent. A failed ensure is logged
    and the caller proceeds, since the bank may already exist.
    """

    def __init__(self, client: HindsightClient, bank_id: str, mission: str) -> None:
        self._client = client
        self.bank_id = bank_id
        self.mission = mission
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    async def ensure(self) -> bool:
        if self._ready:
            return True
        try:
            await self._client.ensure_bank(self.bank_id, self.mission)
        except Exception as exc:
            logger.warning("memory-hindsight: failed to ensure bank", bank=self.bank_id, error=str(exc))
            return False
        self._ready = True
        return True
