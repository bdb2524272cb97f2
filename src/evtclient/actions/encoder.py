"""Action encoder.

Turns an Action into a BinaryAction using the node's ABI encoder and the
domain/key mapper.
"""

import logging

from evtclient.actions.base import Action, BinaryAction
from evtclient.actions.mapper import map_action
from evtclient.chain.base import ChainGateway, NoResponseError

logger = logging.getLogger(__name__)


class ActionEncoder:
    """Encodes actions through a chain gateway, one remote call per action."""

    def __init__(self, gateway: ChainGateway):
        self.gateway = gateway

    async def encode(self, action: Action) -> BinaryAction:
        """Encode one action.

        Args:
            action: Action to encode

        Returns:
            BinaryAction with ``data``, ``domain`` and ``key`` filled

        Raises:
            UnsupportedActionError: If the action type has no domain/key mapping
            NoResponseError: If the node reply carries no ``binargs``
        """
        reply = await self.gateway.abi_json_to_bin(action.to_dict())

        binargs = reply.get("binargs") if isinstance(reply, dict) else None
        if not isinstance(binargs, str):
            raise NoResponseError(f"abi_json_to_bin returned no binargs for {action.action}")

        binary = BinaryAction(name=action.action, data=binargs)
        return map_action(action, binary)
