from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
from typing import Callable
from urllib.parse import quote

import requests

from nomoredm.config import AppSettings
from nomoredm.http import ApiHttpError, HttpClient
from nomoredm.models import ActionOutcome, ActionResult, IncidentActions, TenantId

logger = logging.getLogger(__name__)

PERMISSION_STATUS_CODES = (403,)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IncidentActionsApi:
    def __init__(
        self,
        settings: AppSettings,
        http_client: HttpClient,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._settings = settings
        self._http_client = http_client
        self._clock = clock

    @property
    def protection_window(self) -> timedelta:
        return timedelta(hours=self._settings.protection_hours)

    def build_request(self) -> IncidentActions:
        expires_at = self._clock() + self.protection_window
        return IncidentActions(
            invites_disabled_until=None,
            dms_disabled_until=expires_at.isoformat(),
        )

    def path_for(self, tenant_id: TenantId) -> str:
        return self._settings.action_path_template.format(tenant_id=quote(str(tenant_id), safe=""))

    def apply(self, tenant_id: TenantId, credential: str) -> ActionResult:
        body = self.build_request()

        try:
            path = self.path_for(tenant_id)
            payload = self._http_client.send_json(
                self._settings.action_method,
                credential,
                path,
                body.to_payload(),
            )
            confirmed = IncidentActions.from_payload(payload)
        except ApiHttpError as exc:
            if exc.status_code in PERMISSION_STATUS_CODES:
                logger.warning(
                    "Security actions rejected for tenant %s (HTTP %s), likely missing permission",
                    tenant_id,
                    exc.status_code,
                )
                return ActionResult(
                    tenant_id=tenant_id,
                    outcome=ActionOutcome.REJECTED,
                    cause=str(exc),
                    status_code=exc.status_code,
                )
            logger.error("Failed to enable security actions for tenant %s: %s", tenant_id, exc)
            return ActionResult(
                tenant_id=tenant_id,
                outcome=ActionOutcome.TRANSPORT_FAILURE,
                cause=str(exc),
                status_code=exc.status_code,
            )
        except (requests.RequestException, ValueError, KeyError, IndexError) as exc:
            logger.error("Failed to enable security actions for tenant %s: %s", tenant_id, exc)
            return ActionResult(
                tenant_id=tenant_id,
                outcome=ActionOutcome.TRANSPORT_FAILURE,
                cause=f"{type(exc).__name__}: {exc}",
            )

        if confirmed.dms_disabled_until:
            logger.info(
                "Enabled security actions for tenant %s until %s",
                tenant_id,
                confirmed.dms_disabled_until,
            )
            return ActionResult(
                tenant_id=tenant_id,
                outcome=ActionOutcome.APPLIED,
                expires_at=confirmed.dms_disabled_until,
            )

        logger.warning(
            "Security actions not confirmed for tenant %s, likely missing permission: %r",
            tenant_id,
            payload,
        )
        return ActionResult(
            tenant_id=tenant_id,
            outcome=ActionOutcome.REJECTED,
            cause="Response did not confirm dms_disabled_until",
        )
