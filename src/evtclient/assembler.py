"""Transaction assembly and submission.

Push flow:
1. Copy the request so the caller's data is never mutated
2. Make sure chain info is cached (fetched once per assembler)
3. Encode every action, keeping input order
4. Fill expiration, reference block fields and delay
5. Request the digest, sign it, push the signed transaction
6. Check the execution receipt
"""

import asyncio
import copy
import inspect
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Optional, Union

from evtclient.actions.base import Action
from evtclient.actions.encoder import ActionEncoder
from evtclient.chain.base import ChainGateway, ChainInfo, ChainRejectionError, NoResponseError
from evtclient.signing.base import MissingKeyError
from evtclient.signing.resolver import SignResolver
from evtclient.signing.sources import KeyProvider

logger = logging.getLogger(__name__)

DEFAULT_EXPIRATION_SECONDS = 100

SignProvider = Callable[[bytes, dict], Union[Any, Awaitable[Any]]]


def expiration_from(now: datetime, seconds: int = DEFAULT_EXPIRATION_SECONDS) -> str:
    """Expiration timestamp in whole seconds, without timezone suffix."""
    return (now + timedelta(seconds=seconds)).strftime("%Y-%m-%dT%H:%M:%S")


def check_push_result(result: Any) -> bool:
    """Interpret a ``push_transaction`` reply.

    Returns:
        True if the transaction was executed

    Raises:
        ChainRejectionError: If the chain reported an error or a non-executed receipt
        NoResponseError: If the reply is empty or unreadable
    """
    if not isinstance(result, dict) or not result:
        raise NoResponseError()

    processed = result.get("processed")
    receipt = processed.get("receipt") if isinstance(processed, dict) else None
    status = receipt.get("status") if isinstance(receipt, dict) else None

    if status == "executed":
        return True

    error = result.get("error")
    if isinstance(error, dict):
        details = [
            detail["message"]
            for detail in error.get("details") or []
            if isinstance(detail, dict) and detail.get("message")
        ]
        raise ChainRejectionError(
            error.get("what") or result.get("message") or "transaction rejected",
            error.get("code", result.get("code")),
            details,
        )

    if status is not None:
        raise ChainRejectionError(f"transaction {status}")

    raise NoResponseError()


class TransactionAssembler:
    """Builds, signs and pushes transactions against one chain node.

    Chain info is fetched on first use and kept for the lifetime of the
    assembler; call ``refresh_chain_info`` to fetch it again.
    """

    def __init__(
        self,
        gateway: ChainGateway,
        key_provider: Optional[KeyProvider] = None,
        sign_provider: Optional[SignProvider] = None,
        expiration_seconds: int = DEFAULT_EXPIRATION_SECONDS,
    ):
        """Initialize assembler.

        Args:
            gateway: Chain gateway for all remote calls
            key_provider: Static keys or resolver function for the default signer
            sign_provider: Custom ``(digest, transaction)`` signer replacing the default
            expiration_seconds: Seconds until pushed transactions expire
        """
        self.gateway = gateway
        self.encoder = ActionEncoder(gateway)
        self.expiration_seconds = expiration_seconds

        if sign_provider is None:
            sign_provider = SignResolver(gateway, key_provider).resolve
        self.sign_provider = sign_provider

        self._chain_info: Optional[ChainInfo] = None
        self._info_lock = asyncio.Lock()

    @property
    def has_chain_info(self) -> bool:
        return self._chain_info is not None

    @property
    def chain_info(self) -> Optional[ChainInfo]:
        return self._chain_info

    async def get_info(self) -> ChainInfo:
        """Fetch chain info from the node and replace the cache."""
        async with self._info_lock:
            info = ChainInfo.from_dict(await self.gateway.get_info())
            self._chain_info = info

        logger.info(f"Chain info updated: last irreversible block {info.last_irreversible_block_num}")
        return info

    refresh_chain_info = get_info

    async def _ensure_chain_info(self) -> ChainInfo:
        if self._chain_info is not None:
            return self._chain_info

        async with self._info_lock:
            if self._chain_info is None:
                self._chain_info = ChainInfo.from_dict(await self.gateway.get_info())
                logger.info("Chain info cached")
            return self._chain_info

    async def push_transaction(self, request: dict) -> bool:
        """Assemble, sign and push a transaction.

        Args:
            request: ``{"transaction": {"actions": [{"action": ..., "args": {...}}, ...]}}``

        Returns:
            True if the chain executed the transaction

        Raises:
            UnsupportedActionError: If an action type has no domain/key mapping
            InvalidKeyError: If a supplied key is malformed
            MissingKeyError: If required keys are unavailable
            ChainRejectionError: If the chain refused the transaction
            NoResponseError: If a node reply is empty or malformed
        """
        envelope = copy.deepcopy(request)
        transaction = envelope.get("transaction")
        if not isinstance(transaction, dict) or not isinstance(transaction.get("actions"), list):
            raise ValueError("request must contain a transaction with a list of actions")

        info = await self._ensure_chain_info()

        actions = transaction["actions"]
        for i, raw_action in enumerate(actions):
            binary = await self.encoder.encode(Action.from_dict(raw_action))
            actions[i] = binary.to_dict()

        envelope["compression"] = "none"
        transaction.update(
            expiration=expiration_from(datetime.now(timezone.utc), self.expiration_seconds),
            ref_block_num=info.ref_block_num,
            ref_block_prefix=info.ref_block_prefix,
            delay_sec=0,
        )

        digest = await self._digest(transaction)
        signatures = await self._sign(digest, transaction)
        envelope["signatures"] = signatures

        logger.info(
            f"Pushing transaction with {len(actions)} action(s) and {len(signatures)} signature(s)"
        )
        result = await self.gateway.push_transaction(envelope)
        return check_push_result(result)

    async def _digest(self, transaction: dict) -> bytes:
        reply = await self.gateway.trx_json_to_digest(transaction)
        digest = reply.get("digest") if isinstance(reply, dict) else None
        if not isinstance(digest, str):
            raise NoResponseError("trx_json_to_digest returned no digest")

        try:
            raw = bytes.fromhex(digest)
        except ValueError:
            raise NoResponseError(f"trx_json_to_digest returned a malformed digest: {digest!r}") from None
        if len(raw) != 32:
            raise NoResponseError(f"trx_json_to_digest returned a {len(raw)}-byte digest, expected 32")

        logger.debug(f"Transaction digest {digest}")
        return raw

    async def _sign(self, digest: bytes, transaction: dict) -> list:
        result = self.sign_provider(digest, transaction)
        if inspect.isawaitable(result):
            result = await result

        signatures = list(result) if isinstance(result, (list, tuple)) else [result]
        if not signatures or not all(isinstance(sig, str) and sig for sig in signatures):
            raise MissingKeyError("Sign provider returned no usable signatures")
        return signatures
