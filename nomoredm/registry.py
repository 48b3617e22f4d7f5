from __future__ import annotations

import logging
import threading

from nomoredm.models import TenantId

logger = logging.getLogger(__name__)


class TenantRegistry:
    def __init__(self):
        self._lock = threading.Lock()
        self._tenant_ids: list[TenantId] = []
        self._seen: set[TenantId] = set()

    def record(self, tenant_id: TenantId) -> bool:
        with self._lock:
            if tenant_id in self._seen:
                return False
            self._seen.add(tenant_id)
            self._tenant_ids.append(tenant_id)
        logger.debug("Recorded tenant %s", tenant_id)
        return True

    def snapshot(self) -> tuple[TenantId, ...]:
        with self._lock:
            return tuple(self._tenant_ids)

    def clear(self) -> None:
        with self._lock:
            self._tenant_ids.clear()
            self._seen.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tenant_ids)

    def __contains__(self, tenant_id: object) -> bool:
        with self._lock:
            return tenant_id in self._seen
