"""Action encoding and domain/key routing."""

from evtclient.actions.base import (
    Action,
    ActionType,
    BinaryAction,
    UnsupportedActionError,
)
from evtclient.actions.encoder import ActionEncoder
from evtclient.actions.mapper import map_action, register, supported_actions

__all__ = [
    "Action",
    "ActionEncoder",
    "ActionType",
    "BinaryAction",
    "UnsupportedActionError",
    "map_action",
    "register",
    "supported_actions",
]
