"""Transaction signing.

Provides:
- PrivateKey / PublicKey: parsed keys with canonical string forms
- StaticKeySource / ResolverKeySource: where candidate keys come from
- SignResolver: minimum key set resolution and digest signing
"""

from evtclient.signing.base import InvalidKeyError, MissingKeyError, SigningError
from evtclient.signing.keys import (
    Key,
    PrivateKey,
    PublicKey,
    is_private_key,
    is_public_key,
    normalize_key,
    parse_key,
    recover_public_key,
    sign_digest,
)
from evtclient.signing.resolver import SignResolver, build_key_ledger
from evtclient.signing.sources import (
    KeySource,
    ResolverKeySource,
    StaticKeySource,
    as_key_source,
)

__all__ = [
    "InvalidKeyError",
    "Key",
    "KeySource",
    "MissingKeyError",
    "PrivateKey",
    "PublicKey",
    "ResolverKeySource",
    "SignResolver",
    "SigningError",
    "StaticKeySource",
    "as_key_source",
    "build_key_ledger",
    "is_private_key",
    "is_public_key",
    "normalize_key",
    "parse_key",
    "recover_public_key",
    "sign_digest",
]
