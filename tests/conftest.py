"""Pytest configuration and fixtures."""

import asyncio
import copy
import hashlib
import os
from typing import Optional

import pytest

# Keep local .env files and shell variables out of the tests
os.environ["EVT_PRIVATE_KEYS"] = ""
os.environ["EVT_DEBUG"] = "false"

from evtclient.chain.base import ChainGateway
from evtclient.signing.keys import PrivateKey

# bytes 2-3 = 0x0010, bytes 8-11 = 06 07 08 09
BLOCK_ID = "00000010020304050607080900000000" + "00" * 16
DIGEST = hashlib.sha256(b"evtclient test transaction").digest()

EXECUTED = {"transaction_id": "ab" * 32, "processed": {"receipt": {"status": "executed"}}}


def make_key(n: int) -> PrivateKey:
    """Deterministic private key with secret ``n``."""
    return PrivateKey(n.to_bytes(32, "big"))


class FakeChainGateway(ChainGateway):
    """In-memory gateway returning canned replies and recording every call."""

    def __init__(
        self,
        info: Optional[dict] = None,
        digest: Optional[str] = None,
        required_keys: Optional[list[str]] = None,
        push_result: Optional[dict] = None,
    ):
        self.info = info or {
            "chain_id": "bb" * 32,
            "head_block_num": 20,
            "last_irreversible_block_num": 16,
            "last_irreversible_block_id": BLOCK_ID,
        }
        self.digest = digest if digest is not None else DIGEST.hex()
        self.required_keys = required_keys or []
        self.push_result = push_result if push_result is not None else EXECUTED
        self.calls: list[tuple[str, object]] = []

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    def payloads(self, name: str) -> list:
        return [payload for call, payload in self.calls if call == name]

    async def get_info(self) -> dict:
        self.calls.append(("get_info", None))
        await asyncio.sleep(0)
        return dict(self.info)

    async def abi_json_to_bin(self, action: dict) -> dict:
        self.calls.append(("abi_json_to_bin", copy.deepcopy(action)))
        return {"binargs": f"bin-{action['action']}-{self.count('abi_json_to_bin')}"}

    async def trx_json_to_digest(self, transaction: dict) -> dict:
        self.calls.append(("trx_json_to_digest", copy.deepcopy(transaction)))
        return {"digest": self.digest}

    async def push_transaction(self, signed_transaction: dict) -> dict:
        self.calls.append(("push_transaction", copy.deepcopy(signed_transaction)))
        return self.push_result

    async def get_required_keys(self, transaction: dict, available_keys: list[str]) -> dict:
        self.calls.append(("get_required_keys", list(available_keys)))
        return {"required_keys": list(self.required_keys)}


@pytest.fixture
def gateway() -> FakeChainGateway:
    return FakeChainGateway()


@pytest.fixture
def keys() -> list[PrivateKey]:
    """Three distinct private keys."""
    return [make_key(n) for n in (1, 2, 3)]


@pytest.fixture
def push_request() -> dict:
    return {
        "transaction": {
            "actions": [
                {"action": "newdomain", "args": {"name": "cookie", "creator": "EVT00000"}},
                {"action": "issuetoken", "args": {"domain": "cookie", "names": ["t1"], "owner": []}},
                {"action": "newgroup", "args": {"name": "bakers", "group": {}}},
            ],
        },
    }
