"""evtclient - transaction assembly, signing and submission for everiToken nodes."""

__version__ = "0.1.0"

from evtclient.actions import Action, BinaryAction, UnsupportedActionError
from evtclient.assembler import TransactionAssembler
from evtclient.chain import (
    ChainAPIError,
    ChainError,
    ChainGateway,
    ChainInfo,
    ChainRejectionError,
    HttpChainGateway,
    NoResponseError,
    get_gateway,
)
from evtclient.signing import (
    InvalidKeyError,
    MissingKeyError,
    PrivateKey,
    PublicKey,
    ResolverKeySource,
    SignResolver,
    SigningError,
    StaticKeySource,
)

__all__ = [
    "Action",
    "BinaryAction",
    "ChainAPIError",
    "ChainError",
    "ChainGateway",
    "ChainInfo",
    "ChainRejectionError",
    "HttpChainGateway",
    "InvalidKeyError",
    "MissingKeyError",
    "NoResponseError",
    "PrivateKey",
    "PublicKey",
    "ResolverKeySource",
    "SignResolver",
    "SigningError",
    "StaticKeySource",
    "TransactionAssembler",
    "UnsupportedActionError",
    "get_gateway",
]
