"""Domain/key routing for encoded actions.

Every action pushed to the chain names the ``domain`` and ``key`` it touches.
The values depend on the action type:

    newdomain     domain="domain"        key=args.name
    updatedomain  domain="domain"        key=args.name
    issuetoken    domain=args.domain     key="issue"
    transfer      domain=args.domain     key=args.name
    destroytoken  domain=args.domain     key=args.name
    newgroup      domain="group"         key=args.name
    updategroup   domain="group"         key=args.name

Further action types can be added with ``register``.
"""

import logging
from typing import Callable

from evtclient.actions.base import Action, ActionType, BinaryAction, UnsupportedActionError

logger = logging.getLogger(__name__)

Mapping = Callable[[Action, BinaryAction], None]

_mappings: dict[str, Mapping] = {}


def register(action_type: str) -> Callable[[Mapping], Mapping]:
    """Register the domain/key mapping for an action type.

    Example:
        @register("addmeta")
        def _addmeta(action, binary):
            binary.domain = action.args["domain"]
            binary.key = action.args["key"]
    """
    def decorator(func: Mapping) -> Mapping:
        _mappings[str(action_type)] = func
        return func
    return decorator


def supported_actions() -> list[str]:
    """Action types that have a mapping."""
    return sorted(_mappings)


def map_action(action: Action, binary: BinaryAction) -> BinaryAction:
    """Fill ``binary.domain`` and ``binary.key`` from the source action.

    Raises:
        UnsupportedActionError: If the action type has no mapping
        ValueError: If an argument used for routing is missing
    """
    mapping = _mappings.get(action.action)
    if mapping is None:
        raise UnsupportedActionError(action.action)

    mapping(action, binary)
    logger.debug(f"Mapped {action.action} to domain={binary.domain} key={binary.key}")
    return binary


def _arg(action: Action, name: str) -> str:
    if name not in action.args:
        raise ValueError(f"{action.action} action is missing argument '{name}'")
    return action.args[name]


@register(ActionType.NEW_DOMAIN.value)
@register(ActionType.UPDATE_DOMAIN.value)
def _domain_by_name(action: Action, binary: BinaryAction) -> None:
    binary.domain = "domain"
    binary.key = _arg(action, "name")


@register(ActionType.ISSUE_TOKEN.value)
def _issue_token(action: Action, binary: BinaryAction) -> None:
    binary.domain = _arg(action, "domain")
    binary.key = "issue"


@register(ActionType.TRANSFER.value)
@register(ActionType.DESTROY_TOKEN.value)
def _token_in_domain(action: Action, binary: BinaryAction) -> None:
    binary.domain = _arg(action, "domain")
    binary.key = _arg(action, "name")


@register(ActionType.NEW_GROUP.value)
@register(ActionType.UPDATE_GROUP.value)
def _group_by_name(action: Action, binary: BinaryAction) -> None:
    binary.domain = "group"
    binary.key = _arg(action, "name")
