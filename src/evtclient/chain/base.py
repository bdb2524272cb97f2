"""Base interfaces for talking to an everiToken chain node.

Push flow:
1. Fetch chain info (last irreversible block)
2. Encode each action's arguments to binary
3. Request the digest of the assembled transaction
4. Ask which public keys must sign it
5. Push the signed transaction
"""

import logging
import re
import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


class ChainError(Exception):
    """Base exception for chain node failures."""
    pass


class ChainAPIError(ChainError):
    """Raised when a chain endpoint answers with a non-success HTTP status."""

    def __init__(self, path: str, status_code: int, error: Optional[dict] = None):
        self.path = path
        self.status_code = status_code
        self.error = error or {}
        what = self.error.get("what") or "request failed"
        super().__init__(f"{path} returned HTTP {status_code}: {what}")


class ChainRejectionError(ChainError):
    """Raised when the chain refuses to execute a pushed transaction.

    Attributes:
        what: Remote error summary
        code: Remote error code
        details: Per-action detail messages, in the order the node reported them
    """

    def __init__(self, what: str, code: Optional[int] = None, details: Optional[list[str]] = None):
        self.what = what
        self.code = code
        self.details = details or []
        message = what if code is None else f"{what} ({code})"
        if self.details:
            message += ": " + "".join(f"{detail}; " for detail in self.details)
        super().__init__(message)


class NoResponseError(ChainError):
    """Raised when the chain returns an empty or unreadable response."""

    def __init__(self, message: str = "did not receive anything from the chain"):
        super().__init__(message)


@dataclass
class ChainInfo:
    """Snapshot of the chain head returned by ``get_info``."""

    last_irreversible_block_id: str
    chain_id: Optional[str] = None
    head_block_num: Optional[int] = None
    head_block_id: Optional[str] = None
    last_irreversible_block_num: Optional[int] = None
    raw: dict = field(default_factory=dict)

    def __post_init__(self):
        block_id = self.last_irreversible_block_id
        if len(block_id) < 24 or len(block_id) % 2 or not _HEX_RE.match(block_id):
            raise NoResponseError(f"malformed last_irreversible_block_id: {block_id!r}")

    @classmethod
    def from_dict(cls, data: Any) -> "ChainInfo":
        """Build from a ``get_info`` reply."""
        if not isinstance(data, dict) or not isinstance(data.get("last_irreversible_block_id"), str):
            raise NoResponseError("get_info reply has no last_irreversible_block_id")

        return cls(
            last_irreversible_block_id=data["last_irreversible_block_id"],
            chain_id=data.get("chain_id"),
            head_block_num=data.get("head_block_num"),
            head_block_id=data.get("head_block_id"),
            last_irreversible_block_num=data.get("last_irreversible_block_num"),
            raw=data,
        )

    @property
    def ref_block_num(self) -> int:
        """Big-endian uint16 at bytes 2-3 of the block id."""
        return struct.unpack_from(">H", bytes.fromhex(self.last_irreversible_block_id), 2)[0]

    @property
    def ref_block_prefix(self) -> int:
        """Little-endian uint32 at byte offset 8 of the block id."""
        return struct.unpack_from("<I", bytes.fromhex(self.last_irreversible_block_id), 8)[0]


class ChainGateway(ABC):
    """Abstract base class for chain node access.

    Every call is a single request/response; failures propagate to the caller
    and are never retried here.
    """

    @abstractmethod
    async def get_info(self) -> dict:
        """Fetch the chain head state.

        Returns:
            Parsed ``get_info`` reply including ``last_irreversible_block_id``
        """
        pass

    @abstractmethod
    async def abi_json_to_bin(self, action: dict) -> dict:
        """Encode an action's JSON arguments.

        Args:
            action: ``{"action": name, "args": {...}}``

        Returns:
            Reply with the encoded payload under ``binargs``
        """
        pass

    @abstractmethod
    async def trx_json_to_digest(self, transaction: dict) -> dict:
        """Compute the signing digest of an assembled transaction.

        Returns:
            Reply with the hex digest under ``digest``
        """
        pass

    @abstractmethod
    async def push_transaction(self, signed_transaction: dict) -> dict:
        """Submit a signed transaction.

        Returns:
            Execution receipt or error envelope, whatever the node sent back
        """
        pass

    @abstractmethod
    async def get_required_keys(self, transaction: dict, available_keys: list[str]) -> dict:
        """Ask which of the available public keys must sign the transaction.

        Returns:
            Reply with the public keys under ``required_keys``
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
