from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

TenantId = Union[int, str]

# Embed colours used for command reports.
COLOR_DARK_GREEN = 0x1F8B4C
COLOR_RED = 0xE74C3C


@dataclass(frozen=True)
class IncidentActions:
    invites_disabled_until: str | None = None
    dms_disabled_until: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "invites_disabled_until": self.invites_disabled_until,
            "dms_disabled_until": self.dms_disabled_until,
        }

    @staticmethod
    def from_payload(payload: Any) -> "IncidentActions":
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")

        return IncidentActions(
            invites_disabled_until=_optional_timestamp(payload, "invites_disabled_until"),
            dms_disabled_until=_optional_timestamp(payload, "dms_disabled_until"),
        )


def _optional_timestamp(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string or null")
    return value.strip() or None


class ActionOutcome(str, Enum):
    APPLIED = "applied"
    REJECTED = "rejected"
    TRANSPORT_FAILURE = "transport_failure"


@dataclass(frozen=True)
class ActionResult:
    tenant_id: TenantId
    outcome: ActionOutcome
    expires_at: str | None = None
    cause: str | None = None
    status_code: int | None = None

    @property
    def applied(self) -> bool:
        return self.outcome is ActionOutcome.APPLIED

    @property
    def rejected(self) -> bool:
        return self.outcome is ActionOutcome.REJECTED

    @property
    def transport_failure(self) -> bool:
        return self.outcome is ActionOutcome.TRANSPORT_FAILURE


@dataclass(frozen=True)
class CommandReport:
    title: str
    description: str
    color: int
    success: bool

    def to_embed(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "color": self.color,
        }
