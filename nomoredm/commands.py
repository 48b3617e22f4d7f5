from __future__ import annotations

import logging
from typing import Protocol

from nomoredm.apis import IncidentActionsApi
from nomoredm.auth import CredentialStore
from nomoredm.models import (
    COLOR_DARK_GREEN,
    COLOR_RED,
    ActionOutcome,
    ActionResult,
    CommandReport,
    TenantId,
)

logger = logging.getLogger(__name__)


class Interaction(Protocol):
    command_name: str
    tenant_id: TenantId | None

    def acknowledge(self) -> None: ...

    def deliver(self, report: CommandReport) -> None: ...


def build_report(result: ActionResult, protection_hours: int = 24) -> CommandReport:
    if result.applied:
        return CommandReport(
            title="Success",
            description=f"Enabled security actions for {protection_hours} hours.",
            color=COLOR_DARK_GREEN,
            success=True,
        )

    if result.rejected:
        description = "Failed to enable security actions. Maybe permissions are missing?"
    elif result.status_code == 401:
        description = "Failed to enable security actions: the bot token was refused."
    else:
        description = "Failed to enable security actions: could not reach the API. Try again later."

    return CommandReport(title="Error", description=description, color=COLOR_RED, success=False)


NO_TENANT_REPORT = CommandReport(
    title="Error",
    description="This command can only be used in a server.",
    color=COLOR_RED,
    success=False,
)


class InstantCommandHandler:
    def __init__(
        self,
        incident_actions_api: IncidentActionsApi,
        credential_store: CredentialStore,
        protection_hours: int = 24,
    ):
        self._api = incident_actions_api
        self._credentials = credential_store
        self._protection_hours = protection_hours

    def run(self, tenant_id: TenantId) -> ActionResult:
        try:
            return self._api.apply(tenant_id, self._credentials.get())
        except Exception as exc:
            logger.exception("Unexpected error while running instant for tenant %s", tenant_id)
            return ActionResult(
                tenant_id=tenant_id,
                outcome=ActionOutcome.TRANSPORT_FAILURE,
                cause=f"{type(exc).__name__}: {exc}",
            )

    def handle(self, interaction: Interaction) -> ActionResult | None:
        try:
            interaction.acknowledge()
        except Exception:
            logger.exception("Failed to acknowledge command '%s'", interaction.command_name)

        tenant_id = interaction.tenant_id
        if tenant_id is None:
            logger.warning("Ignoring '%s' invoked outside a server", interaction.command_name)
            self._deliver(interaction, NO_TENANT_REPORT)
            return None

        result = self.run(tenant_id)
        self._deliver(interaction, build_report(result, self._protection_hours))
        return result

    @staticmethod
    def _deliver(interaction: Interaction, report: CommandReport) -> None:
        try:
            interaction.deliver(report)
        except Exception:
            logger.exception("Failed to deliver report for command '%s'", interaction.command_name)
