"""Signature resolution.

Works out the minimum set of private keys needed for a transaction and signs
its digest with each of them.

If exactly one private key is available, the chain is not consulted and that
key signs the transaction. Otherwise the chain's ``get_required_keys`` decides
which of the candidate public keys must sign.
"""

import logging
from typing import Iterable, Optional

from evtclient.chain.base import ChainGateway
from evtclient.signing.base import InvalidKeyError, MissingKeyError
from evtclient.signing.keys import Key, PrivateKey, PublicKey, parse_key, sign_digest
from evtclient.signing.sources import KeyProvider, KeySource, as_key_source

logger = logging.getLogger(__name__)


def build_key_ledger(keys: Iterable[Key]) -> dict[str, Optional[PrivateKey]]:
    """Map canonical public keys to their private key, if known.

    A private key wins over a public-only entry for the same public key.
    """
    ledger: dict[str, Optional[PrivateKey]] = {}
    for key in keys:
        if isinstance(key, PrivateKey):
            ledger[str(key.public_key())] = key
        else:
            ledger.setdefault(str(key), None)
    return ledger


class SignResolver:
    """Produces the signature set for a transaction digest."""

    def __init__(self, gateway: ChainGateway, key_source: Optional[KeyProvider]):
        """Initialize resolver.

        Args:
            gateway: Chain gateway used for the required-keys query
            key_source: KeySource, resolver function, or static keys
        """
        self.gateway = gateway
        self.key_source = key_source

    async def resolve(self, digest: bytes, transaction: dict) -> list[str]:
        """Sign a digest with every key the transaction requires.

        Args:
            digest: 32-byte transaction digest
            transaction: Assembled transaction (passed to the key source and chain)

        Returns:
            Signatures in the order their keys were queued

        Raises:
            InvalidKeyError: If a supplied key cannot be parsed
            MissingKeyError: If no keys are supplied or a required key is unavailable
        """
        source = as_key_source(self.key_source)
        keys = [parse_key(key) for key in await source.keys_for(transaction)]
        if not keys:
            raise MissingKeyError("missing key, check your key provider")

        if len(keys) == 1 and isinstance(keys[0], PrivateKey):
            logger.debug("Single private key supplied, skipping required keys lookup")
            return [sign_digest(digest, keys[0])]

        ledger = build_key_ledger(keys)
        required = await self._required_keys(transaction, list(ledger))

        to_sign: list[PrivateKey] = []
        missing: list[str] = []
        for pubkey in required:
            private_key = ledger.get(pubkey)
            if private_key is not None:
                to_sign.append(private_key)
            else:
                missing.append(pubkey)

        if missing:
            to_sign.extend(await self._lookup_missing(source, missing))

        logger.info(f"Signing digest with {len(to_sign)} key(s)")
        return [sign_digest(digest, key) for key in to_sign]

    async def _required_keys(self, transaction: dict, pubkeys: list[str]) -> list[str]:
        reply = await self.gateway.get_required_keys(transaction, pubkeys)
        required = reply.get("required_keys") if isinstance(reply, dict) else None

        if not required:
            raise MissingKeyError(
                f"Chain reported no required keys among {len(pubkeys)} candidate key(s)"
            )

        return [str(PublicKey.from_string(key)) for key in required]

    async def _lookup_missing(self, source: KeySource, missing: list[str]) -> list[PrivateKey]:
        logger.info(f"{len(missing)} required key(s) not supplied, asking key source")
        found = await source.lookup(missing)

        resolved: dict[str, PrivateKey] = {}
        for value in found:
            key = parse_key(value)
            if not isinstance(key, PrivateKey):
                raise InvalidKeyError("Key lookup must return private keys")
            resolved.setdefault(str(key.public_key()), key)

        unresolved = [pubkey for pubkey in missing if pubkey not in resolved]
        if unresolved:
            raise MissingKeyError(f"No private key found for required key(s): {', '.join(unresolved)}")

        return [resolved[pubkey] for pubkey in missing]
