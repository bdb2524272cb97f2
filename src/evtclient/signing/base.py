"""Signing errors.

Signing flow:
1. Collect candidate keys from the key source
2. Normalize them (private keys win over public-only entries)
3. Ask the chain which public keys must sign
4. Look up any private keys still missing
5. Sign the digest once per required key
"""


class SigningError(Exception):
    """Exception raised when signing fails."""
    pass


class InvalidKeyError(SigningError):
    """Exception raised when a value is neither a private nor a public key."""
    pass


class MissingKeyError(SigningError):
    """Exception raised when no usable key is available for a required signature."""
    pass
