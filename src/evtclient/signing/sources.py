"""Key sources.

A key source supplies the candidate signing keys for a transaction. It is
either a fixed set of keys or a resolver function. Only a resolver function
can look up private keys for public keys the chain requires but the caller did
not hand over.

Resolver functions are called with one keyword argument:

    func(transaction=...)   -> keys to consider for this transaction
    func(pubkeys=[...])     -> private keys for the given public keys

and may return a single key, a sequence of keys, or an awaitable of either.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Optional, Union

from evtclient.signing.base import MissingKeyError
from evtclient.signing.keys import PrivateKey, PublicKey

logger = logging.getLogger(__name__)

KeyValue = Union[str, PrivateKey, PublicKey]


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (str, PrivateKey, PublicKey)):
        return [value]
    return list(value)


class KeySource(ABC):
    """Abstract base class for key sources."""

    can_lookup: bool = False

    @abstractmethod
    async def keys_for(self, transaction: dict) -> list:
        """Return the candidate keys for a transaction."""
        pass

    async def lookup(self, pubkeys: list[str]) -> list:
        """Return private keys for the given public keys.

        Raises:
            MissingKeyError: If this source cannot look keys up
        """
        raise MissingKeyError(
            f"A key resolver function is needed for private key lookup "
            f"({len(pubkeys)} required key(s) missing)"
        )


class StaticKeySource(KeySource):
    """Fixed set of keys."""

    def __init__(self, keys: Iterable[KeyValue]):
        self._keys = _as_list(keys)

    async def keys_for(self, transaction: dict) -> list:
        return list(self._keys)

    def __repr__(self) -> str:
        return f"StaticKeySource(count={len(self._keys)})"


class ResolverKeySource(KeySource):
    """Keys produced on demand by a caller-supplied function."""

    can_lookup = True

    def __init__(self, func: Callable[..., Any]):
        self.func = func

    async def _call(self, **kwargs) -> list:
        result = self.func(**kwargs)
        if inspect.isawaitable(result):
            result = await result
        return _as_list(result)

    async def keys_for(self, transaction: dict) -> list:
        return await self._call(transaction=transaction)

    async def lookup(self, pubkeys: list[str]) -> list:
        logger.debug(f"Looking up private keys for {len(pubkeys)} public key(s)")
        return await self._call(pubkeys=list(pubkeys))

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", type(self.func).__name__)
        return f"ResolverKeySource(func={name})"


KeyProvider = Union[KeySource, Callable[..., Any], Iterable[KeyValue], KeyValue]


def as_key_source(value: Optional[KeyProvider]) -> KeySource:
    """Wrap a configured key provider in the matching KeySource variant.

    Args:
        value: KeySource, resolver function, single key, or iterable of keys

    Raises:
        MissingKeyError: If no key provider is configured
    """
    if value is None:
        raise MissingKeyError("This transaction requires a key provider for signing")
    if isinstance(value, KeySource):
        return value
    if callable(value):
        return ResolverKeySource(value)
    return StaticKeySource(_as_list(value))
