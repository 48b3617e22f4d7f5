from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time
from typing import Callable, Iterable

from nomoredm.apis import IncidentActionsApi
from nomoredm.auth import CredentialStore
from nomoredm.models import ActionOutcome, ActionResult, TenantId

logger = logging.getLogger(__name__)


@dataclass
class DispatchSummary:
    results: list[ActionResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def applied(self) -> int:
        return sum(1 for r in self.results if r.applied)

    @property
    def rejected(self) -> int:
        return sum(1 for r in self.results if r.rejected)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.transport_failure)


class DispatchSequencer:
    def __init__(
        self,
        incident_actions_api: IncidentActionsApi,
        credential_store: CredentialStore,
        delay_seconds: float = 2.0,
        sleep: Callable[[float], object] = time.sleep,
    ):
        self._api = incident_actions_api
        self._credentials = credential_store
        self._delay_seconds = delay_seconds
        self._sleep = sleep

    def run_over(self, tenant_ids: Iterable[TenantId]) -> DispatchSummary:
        summary = DispatchSummary()
        for index, tenant_id in enumerate(tenant_ids):
            if index and self._delay_seconds > 0:
                self._sleep(self._delay_seconds)
            summary.results.append(self._apply_one(tenant_id))

        logger.info(
            "Dispatch pass finished: %d tenant(s), %d applied, %d rejected, %d failed",
            summary.total,
            summary.applied,
            summary.rejected,
            summary.failed,
        )
        return summary

    def _apply_one(self, tenant_id: TenantId) -> ActionResult:
        try:
            return self._api.apply(tenant_id, self._credentials.get())
        except Exception as exc:
            logger.exception("Unexpected error while dispatching tenant %s", tenant_id)
            return ActionResult(
                tenant_id=tenant_id,
                outcome=ActionOutcome.TRANSPORT_FAILURE,
                cause=f"{type(exc).__name__}: {exc}",
            )
