from .commands_api import CommandsApi, INSTANT_COMMAND_NAME, build_instant_command
from .incident_actions_api import IncidentActionsApi

__all__ = ["CommandsApi", "IncidentActionsApi", "INSTANT_COMMAND_NAME", "build_instant_command"]
