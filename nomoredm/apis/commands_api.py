from __future__ import annotations

import logging
from typing import Any

from nomoredm.http import HttpClient

logger = logging.getLogger(__name__)

INSTANT_COMMAND_NAME = "instant"
MANAGE_GUILD_PERMISSION = 1 << 5


def build_instant_command() -> dict[str, Any]:
    return {
        "name": INSTANT_COMMAND_NAME,
        "description": "Instant Enable security actions",
        "type": 1,
        "default_member_permissions": str(MANAGE_GUILD_PERMISSION),
        "dm_permission": False,
    }


class CommandsApi:
    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def register_global_commands(
        self,
        token: str,
        application_id: int | str,
        commands: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        path = f"/applications/{application_id}/commands"
        registered = self._http_client.put_json(token, path, commands)
        if not isinstance(registered, list):
            return []
        logger.info(
            "Registered %d global command(s): %s",
            len(registered),
            ", ".join(str(c.get("name", "?")) for c in registered if isinstance(c, dict)),
        )
        return registered
