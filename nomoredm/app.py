from __future__ import annotations

import logging
import os
import sys
import threading

from nomoredm.apis import CommandsApi, IncidentActionsApi
from nomoredm.auth import CredentialStore
from nomoredm.commands import InstantCommandHandler
from nomoredm.config import AppSettings, ConfigurationError
from nomoredm.dispatch import DispatchSequencer
from nomoredm.http import HttpClient
from nomoredm.logging_utils import configure_logging
from nomoredm.registry import TenantRegistry
from nomoredm.scheduler import SchedulerLoop
from nomoredm.services import ProtectionService

logger = logging.getLogger(__name__)


def build_service(settings: AppSettings, http_client: HttpClient | None = None) -> ProtectionService:
    credential_store = CredentialStore(settings.token)
    http_client = http_client or HttpClient(settings)
    incident_actions_api = IncidentActionsApi(settings, http_client)
    registry = TenantRegistry()
    sequencer = DispatchSequencer(
        incident_actions_api,
        credential_store,
        delay_seconds=settings.dispatch_delay_seconds,
    )
    return ProtectionService(
        credential_store=credential_store,
        registry=registry,
        scheduler=SchedulerLoop(
            registry,
            sequencer,
            interval_seconds=settings.interval_seconds,
            run_on_start=settings.run_on_start,
        ),
        command_handler=InstantCommandHandler(
            incident_actions_api,
            credential_store,
            protection_hours=settings.protection_hours,
        ),
        commands_api=CommandsApi(http_client),
    )


def _seed_tenants(service: ProtectionService, tenant_ids: tuple[str, ...]) -> None:
    for raw_id in tenant_ids:
        tenant_id = int(raw_id) if raw_id.isdigit() else raw_id
        service.on_tenant_joined(tenant_id)


def run(stop_event: threading.Event | None = None) -> int:
    configure_logging(os.getenv("NOMOREDM_LOG_LEVEL", "INFO"))
    logger.info("Starting NoMoreDM")

    try:
        settings = AppSettings.from_env()
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    configure_logging(settings.log_level)
    http_client = HttpClient(settings)
    service = build_service(settings, http_client)
    _seed_tenants(service, settings.seed_tenant_ids)
    service.start()

    stop_event = stop_event or threading.Event()
    try:
        while not stop_event.wait(1.0):
            pass
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        service.stop(timeout=5)
        http_client.close()
    return 0


def main() -> None:
    sys.exit(run())
