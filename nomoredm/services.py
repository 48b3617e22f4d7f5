from __future__ import annotations

import logging

from nomoredm.apis import INSTANT_COMMAND_NAME, CommandsApi, build_instant_command
from nomoredm.auth import CredentialStore
from nomoredm.commands import InstantCommandHandler, Interaction
from nomoredm.dispatch import DispatchSummary
from nomoredm.models import ActionResult, TenantId
from nomoredm.registry import TenantRegistry
from nomoredm.scheduler import SchedulerLoop

logger = logging.getLogger(__name__)


class ProtectionService:
    def __init__(
        self,
        credential_store: CredentialStore,
        registry: TenantRegistry,
        scheduler: SchedulerLoop,
        command_handler: InstantCommandHandler,
        commands_api: CommandsApi,
    ):
        self._credential_store = credential_store
        self._registry = registry
        self._scheduler = scheduler
        self._command_handler = command_handler
        self._commands_api = commands_api

    @property
    def registry(self) -> TenantRegistry:
        return self._registry

    @property
    def scheduler(self) -> SchedulerLoop:
        return self._scheduler

    def start(self) -> None:
        self._scheduler.start()

    def stop(self, timeout: float | None = None) -> None:
        self._scheduler.stop(timeout)

    def on_ready(self, application_id: int | str, user_name: str | None = None) -> bool:
        logger.info("%s is connected!", user_name or "Bot")
        try:
            self._commands_api.register_global_commands(
                self._credential_store.get(),
                application_id,
                [build_instant_command()],
            )
        except Exception:
            logger.exception("Failed to register application commands")
            return False
        return True

    def on_tenant_joined(self, tenant_id: TenantId, name: str | None = None) -> bool:
        logger.info("Guild: %s (%s)", name or "<unknown>", tenant_id)
        return self._registry.record(tenant_id)

    def on_command(self, interaction: Interaction) -> ActionResult | None:
        if interaction.command_name != INSTANT_COMMAND_NAME:
            return None
        return self._command_handler.handle(interaction)

    def run_pass(self) -> DispatchSummary | None:
        return self._scheduler.run_pass()
