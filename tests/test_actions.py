"""Tests for action encoding and domain/key routing."""

from unittest.mock import AsyncMock

import httpx
import pytest

from evtclient.actions import mapper
from evtclient.actions.base import Action, BinaryAction, UnsupportedActionError
from evtclient.actions.encoder import ActionEncoder
from evtclient.chain.base import NoResponseError


class TestDomainKeyMapper:
    """Tests for the domain/key mapping table."""

    @pytest.mark.parametrize(
        "action_type,args,expected",
        [
            ("newdomain", {"name": "cookie"}, ("domain", "cookie")),
            ("updatedomain", {"name": "cookie"}, ("domain", "cookie")),
            ("issuetoken", {"domain": "cookie", "names": ["t1"]}, ("cookie", "issue")),
            ("transfer", {"domain": "cookie", "name": "t1"}, ("cookie", "t1")),
            ("destroytoken", {"domain": "cookie", "name": "t1"}, ("cookie", "t1")),
            ("newgroup", {"name": "bakers"}, ("group", "bakers")),
            ("updategroup", {"name": "bakers"}, ("group", "bakers")),
        ],
    )
    def test_documented_pairs(self, action_type, args, expected):
        """Test each supported action routes to its documented domain/key."""
        binary = mapper.map_action(Action(action_type, args), BinaryAction(action_type, "00"))

        assert (binary.domain, binary.key) == expected

    def test_unsupported_action_names_type(self):
        """Test unknown action types fail loudly with the type name."""
        with pytest.raises(UnsupportedActionError) as exc_info:
            mapper.map_action(Action("everipay", {}), BinaryAction("everipay", "00"))

        assert exc_info.value.action_type == "everipay"
        assert "everipay" in str(exc_info.value)

    def test_missing_routing_argument(self):
        """Test a missing routing argument names the field."""
        with pytest.raises(ValueError, match="'name'"):
            mapper.map_action(Action("newdomain", {}), BinaryAction("newdomain", "00"))

    def test_register_new_action(self):
        """Test registering a mapping for a new action type."""

        @mapper.register("addmeta")
        def _addmeta(action, binary):
            binary.domain = action.args["domain"]
            binary.key = action.args["key"]

        try:
            binary = mapper.map_action(
                Action("addmeta", {"domain": "cookie", "key": "t1"}),
                BinaryAction("addmeta", "00"),
            )
            assert (binary.domain, binary.key) == ("cookie", "t1")
            assert "addmeta" in mapper.supported_actions()
        finally:
            mapper._mappings.pop("addmeta", None)

    def test_supported_actions(self):
        """Test the required action types are always supported."""
        supported = mapper.supported_actions()

        for action_type in ("newdomain", "issuetoken", "newgroup"):
            assert action_type in supported


class TestAction:
    """Tests for Action parsing."""

    def test_from_dict(self):
        action = Action.from_dict({"action": "newgroup", "args": {"name": "bakers"}})

        assert action.action == "newgroup"
        assert action.args == {"name": "bakers"}

    def test_from_dict_requires_action_name(self):
        with pytest.raises(ValueError):
            Action.from_dict({"args": {}})


class TestActionEncoder:
    """Tests for the ActionEncoder."""

    @pytest.mark.asyncio
    async def test_encode(self, gateway):
        """Test encoding calls the node once and fills routing fields."""
        encoder = ActionEncoder(gateway)

        binary = await encoder.encode(Action("issuetoken", {"domain": "cookie", "names": ["t1"]}))

        assert binary.to_dict() == {
            "name": "issuetoken",
            "domain": "cookie",
            "key": "issue",
            "data": "bin-issuetoken-1",
        }
        assert gateway.payloads("abi_json_to_bin") == [
            {"action": "issuetoken", "args": {"domain": "cookie", "names": ["t1"]}}
        ]

    @pytest.mark.asyncio
    async def test_encode_without_binargs(self, gateway):
        """Test a reply without binargs is reported as no response."""
        gateway.abi_json_to_bin = AsyncMock(return_value={})

        with pytest.raises(NoResponseError):
            await ActionEncoder(gateway).encode(Action("newdomain", {"name": "cookie"}))

    @pytest.mark.asyncio
    async def test_encode_propagates_transport_errors(self, gateway):
        """Test transport errors surface unchanged."""
        gateway.abi_json_to_bin = AsyncMock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(httpx.ConnectError):
            await ActionEncoder(gateway).encode(Action("newdomain", {"name": "cookie"}))

        gateway.abi_json_to_bin.assert_awaited_once_with({"action": "newdomain", "args": {"name": "cookie"}})

    @pytest.mark.asyncio
    async def test_encode_unsupported_action(self, gateway):
        """Test unsupported actions fail after encoding."""
        with pytest.raises(UnsupportedActionError):
            await ActionEncoder(gateway).encode(Action("everipay", {}))
