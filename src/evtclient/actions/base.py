"""Action types.

An Action is what the caller writes (type name + JSON arguments). A
BinaryAction is what the node accepts in ``push_transaction``: the encoded
arguments plus the ``domain``/``key`` routing fields.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(str, Enum):
    """Action kinds with a known domain/key routing."""
    NEW_DOMAIN = "newdomain"
    UPDATE_DOMAIN = "updatedomain"
    ISSUE_TOKEN = "issuetoken"
    TRANSFER = "transfer"
    DESTROY_TOKEN = "destroytoken"
    NEW_GROUP = "newgroup"
    UPDATE_GROUP = "updategroup"


class UnsupportedActionError(Exception):
    """Raised when an action type has no domain/key mapping."""

    def __init__(self, action_type: str):
        self.action_type = action_type
        super().__init__(f"Unsupported action type: {action_type!r}")


@dataclass(frozen=True)
class Action:
    """Human-readable action.

    Attributes:
        action: Action type name (e.g. "newdomain")
        args: Action arguments as JSON-compatible values
    """
    action: str
    args: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Action":
        """Build from ``{"action": ..., "args": {...}}``."""
        if not isinstance(data, dict) or not isinstance(data.get("action"), str):
            raise ValueError("action must be a mapping with a string 'action' field")
        return cls(action=data["action"], args=dict(data.get("args") or {}))

    def to_dict(self) -> dict:
        return {"action": self.action, "args": self.args}


@dataclass
class BinaryAction:
    """Encoded action ready for ``push_transaction``."""
    name: str
    data: str
    domain: str = ""
    key: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "domain": self.domain,
            "key": self.key,
            "data": self.data,
        }
