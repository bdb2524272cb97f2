"""Key and signature encodings for secp256k1 keys.

Accepted encodings:
- Private keys: legacy WIF (``5...``) and ``PVT_K1_...``
- Public keys: ``EVT...``, legacy ``EOS...`` and ``PUB_K1_...``

Canonical forms are WIF for private keys and ``EVT...`` for public keys.
Signatures are ``SIG_K1_...`` over the 65-byte compact form ``i || r || s``.
"""

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

import base58
from ecdsa import SECP256k1, SigningKey, VerifyingKey
from ecdsa.util import sigdecode_string, sigencode_strings_canonize

from evtclient.signing.base import InvalidKeyError, SigningError

logger = logging.getLogger(__name__)

PUBLIC_KEY_PREFIX = "EVT"
LEGACY_PUBLIC_KEY_PREFIXES = ("EVT", "EOS")
PRIVATE_K1_PREFIX = "PVT_K1_"
PUBLIC_K1_PREFIX = "PUB_K1_"
SIGNATURE_K1_PREFIX = "SIG_K1_"

WIF_VERSION = 0x80
RECOVERY_OFFSET = 27 + 4  # compressed-key recovery header

_B58_ALPHABET = frozenset("123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz")
_CURVE_P = SECP256k1.curve.p()
_CURVE_N = SECP256k1.order


def _ripemd160(data: bytes) -> bytes:
    return hashlib.new("ripemd160", data).digest()


def _double_sha256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def _b58decode(value: str) -> Optional[bytes]:
    """Decode base58, or None if the string has characters outside the alphabet."""
    if not value or not set(value) <= _B58_ALPHABET:
        return None
    return base58.b58decode(value)


def _k1_encode(prefix: str, data: bytes) -> str:
    return prefix + base58.b58encode(data + _ripemd160(data + b"K1")[:4]).decode()


def _k1_decode(value: str, prefix: str, size: int) -> Optional[bytes]:
    if not value.startswith(prefix):
        return None
    raw = _b58decode(value[len(prefix):])
    if raw is None or len(raw) != size + 4:
        return None
    data, checksum = raw[:-4], raw[-4:]
    if _ripemd160(data + b"K1")[:4] != checksum:
        return None
    return data


def _decode_wif(value: str) -> Optional[bytes]:
    raw = _b58decode(value)
    if raw is None or len(raw) not in (37, 38):
        return None
    payload, checksum = raw[:-4], raw[-4:]
    if payload[0] != WIF_VERSION or _double_sha256(payload)[:4] != checksum:
        return None
    if len(payload) == 34 and payload[-1] != 0x01:
        return None
    return payload[1:33]


def _decode_legacy_public(value: str) -> Optional[bytes]:
    for prefix in LEGACY_PUBLIC_KEY_PREFIXES:
        if value.startswith(prefix):
            raw = _b58decode(value[len(prefix):])
            if raw is None or len(raw) != 37:
                return None
            point, checksum = raw[:-4], raw[-4:]
            if _ripemd160(point)[:4] != checksum:
                return None
            return point
    return None


def _valid_secret(secret: Optional[bytes]) -> bool:
    return secret is not None and 0 < int.from_bytes(secret, "big") < _CURVE_N


def _valid_point(point: Optional[bytes]) -> bool:
    """Check a compressed point lies on secp256k1."""
    if point is None or len(point) != 33 or point[0] not in (2, 3):
        return False
    x = int.from_bytes(point[1:], "big")
    if x >= _CURVE_P:
        return False
    alpha = (pow(x, 3, _CURVE_P) + 7) % _CURVE_P
    return alpha == 0 or pow(alpha, (_CURVE_P - 1) // 2, _CURVE_P) == 1


def _decode_private(value: str) -> Optional[bytes]:
    if value.startswith(PRIVATE_K1_PREFIX):
        secret = _k1_decode(value, PRIVATE_K1_PREFIX, 32)
    else:
        secret = _decode_wif(value)
    return secret if _valid_secret(secret) else None


def _decode_public(value: str) -> Optional[bytes]:
    if value.startswith(PUBLIC_K1_PREFIX):
        point = _k1_decode(value, PUBLIC_K1_PREFIX, 33)
    else:
        point = _decode_legacy_public(value)
    return point if _valid_point(point) else None


def _masked(value: object) -> str:
    """Short hint for error messages; never the full key."""
    if not isinstance(value, str):
        return type(value).__name__
    return f"{value[:6]}..." if len(value) > 6 else repr(value)


@dataclass(frozen=True)
class PublicKey:
    """Compressed secp256k1 public key."""

    point: bytes

    @classmethod
    def from_string(cls, value: str) -> "PublicKey":
        """Parse any accepted public key encoding.

        Raises:
            InvalidKeyError: If the value is not a valid public key
        """
        point = _decode_public(value) if isinstance(value, str) else None
        if point is None:
            raise InvalidKeyError(f"Invalid public key: {_masked(value)}")
        return cls(point)

    def __str__(self) -> str:
        return PUBLIC_KEY_PREFIX + base58.b58encode(self.point + _ripemd160(self.point)[:4]).decode()


@dataclass(frozen=True)
class PrivateKey:
    """secp256k1 private key. The secret is excluded from repr."""

    secret: bytes = field(repr=False)

    @classmethod
    def from_string(cls, value: str) -> "PrivateKey":
        """Parse any accepted private key encoding.

        Raises:
            InvalidKeyError: If the value is not a valid private key
        """
        secret = _decode_private(value) if isinstance(value, str) else None
        if secret is None:
            raise InvalidKeyError(f"Invalid private key: {_masked(value)}")
        return cls(secret)

    def public_key(self) -> PublicKey:
        """Derive the compressed public key."""
        sk = SigningKey.from_string(self.secret, curve=SECP256k1)
        return PublicKey(sk.get_verifying_key().to_string("compressed"))

    def to_k1(self) -> str:
        """Encode in ``PVT_K1_`` form."""
        return _k1_encode(PRIVATE_K1_PREFIX, self.secret)

    def __str__(self) -> str:
        return base58.b58encode_check(bytes([WIF_VERSION]) + self.secret).decode()


Key = Union[PrivateKey, PublicKey]


def is_private_key(value: object) -> bool:
    """Check whether a string is a valid private key encoding."""
    return isinstance(value, str) and _decode_private(value) is not None


def is_public_key(value: object) -> bool:
    """Check whether a string is a valid public key encoding."""
    return isinstance(value, str) and _decode_public(value) is not None


def parse_key(value: Union[str, Key]) -> Key:
    """Parse a key string into a PrivateKey or PublicKey.

    Private key encodings are checked first.

    Raises:
        InvalidKeyError: If the value is neither
    """
    if isinstance(value, (PrivateKey, PublicKey)):
        return value
    if is_private_key(value):
        return PrivateKey.from_string(value)
    if is_public_key(value):
        return PublicKey.from_string(value)
    raise InvalidKeyError(f"Expected a public or private key, got {_masked(value)}")


def normalize_key(value: Union[str, Key]) -> str:
    """Return the canonical string form of a key."""
    return str(parse_key(value))


def _is_canonical(r: bytes, s: bytes) -> bool:
    return (
        not r[0] & 0x80
        and not (r[0] == 0 and not r[1] & 0x80)
        and not s[0] & 0x80
        and not (s[0] == 0 and not s[1] & 0x80)
    )


def _recover_candidates(digest: bytes, rs: bytes) -> list[VerifyingKey]:
    return VerifyingKey.from_public_key_recovery_with_digest(
        rs,
        digest,
        SECP256k1,
        hashfunc=hashlib.sha256,
        sigdecode=sigdecode_string,
    )


def sign_digest(digest: bytes, private_key: Union[str, PrivateKey]) -> str:
    """Sign a 32-byte digest.

    The nonce is deterministic (RFC 6979); extra entropy is mixed in until
    both r and s are canonical.

    Args:
        digest: 32-byte digest
        private_key: PrivateKey or any accepted private key string

    Returns:
        ``SIG_K1_`` signature string
    """
    if len(digest) != 32:
        raise ValueError(f"Digest must be 32 bytes, got {len(digest)}")

    if not isinstance(private_key, PrivateKey):
        private_key = PrivateKey.from_string(private_key)

    sk = SigningKey.from_string(private_key.secret, curve=SECP256k1)

    attempt = 0
    while True:
        entropy = attempt.to_bytes(32, "big") if attempt else b""
        r, s = sk.sign_digest_deterministic(
            digest,
            hashfunc=hashlib.sha256,
            sigencode=sigencode_strings_canonize,
            extra_entropy=entropy,
        )
        if _is_canonical(r, s):
            break
        attempt += 1

    expected = sk.get_verifying_key().to_string()
    for recid, candidate in enumerate(_recover_candidates(digest, r + s)):
        if candidate.to_string() == expected:
            break
    else:
        raise SigningError("Could not determine signature recovery id")

    compact = bytes([RECOVERY_OFFSET + recid]) + r + s
    return _k1_encode(SIGNATURE_K1_PREFIX, compact)


def recover_public_key(digest: bytes, signature: str) -> PublicKey:
    """Recover the public key that produced a ``SIG_K1_`` signature.

    Raises:
        ValueError: If the signature is malformed
    """
    compact = _k1_decode(signature, SIGNATURE_K1_PREFIX, 65)
    if compact is None:
        raise ValueError("Malformed signature")

    recid = compact[0] - RECOVERY_OFFSET
    if recid not in (0, 1):
        raise ValueError(f"Unsupported recovery header: {compact[0]}")

    candidate = _recover_candidates(digest, compact[1:])[recid]
    return PublicKey(candidate.to_string("compressed"))
