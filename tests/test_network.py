"""Tests for the httpx JSON-RPC binding, run against httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest
from eth_account import Account

from conftest import BALANCE_OF_ABI, OWNER_ADDRESS, TOKEN_ADDRESS, encode_response
from pocketeth.config import NetworkConfig
from pocketeth.contract import EthContract
from pocketeth.errors import NetworkError
from pocketeth.network import HttpNetwork
from pocketeth.types import format_block_tag

RPC_URL = "http://node.test:8545"


def make_network(
    handler: Callable[[dict[str, Any]], httpx.Response],
    requests: list[dict[str, Any]],
    chain_id: int = 1,
) -> HttpNetwork:
    def _handle(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        requests.append(body)
        return handler(body)

    client = httpx.AsyncClient(transport=httpx.MockTransport(_handle))
    return HttpNetwork(NetworkConfig(rpc_url=RPC_URL, chain_id=chain_id), client=client)


def rpc_result(result: Any) -> Callable[[dict[str, Any]], httpx.Response]:
    return lambda body: httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


class TestRequest:
    @pytest.mark.asyncio
    async def test_request_envelope(self) -> None:
        requests: list[dict[str, Any]] = []
        network = make_network(rpc_result("0x1"), requests)

        await network.request("eth_blockNumber", [])
        await network.request("eth_blockNumber", [])

        assert requests[0]["jsonrpc"] == "2.0"
        assert requests[0]["method"] == "eth_blockNumber"
        assert [r["id"] for r in requests] == [1, 2]

    @pytest.mark.asyncio
    async def test_rpc_error_object(self) -> None:
        def handler(body: dict[str, Any]) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": body["id"],
                    "error": {"code": 3, "message": "execution reverted", "data": "0x08c379a0"},
                },
            )

        network = make_network(handler, [])
        with pytest.raises(NetworkError, match="execution reverted") as exc_info:
            await network.request("eth_call", [])
        assert exc_info.value.code == 3
        assert exc_info.value.data == "0x08c379a0"

    @pytest.mark.asyncio
    async def test_http_status_error(self) -> None:
        network = make_network(lambda body: httpx.Response(503, text="busy"), [])
        with pytest.raises(NetworkError, match="eth_call"):
            await network.request("eth_call", [])

    @pytest.mark.asyncio
    async def test_non_json_response(self) -> None:
        network = make_network(lambda body: httpx.Response(200, text="<html>"), [])
        with pytest.raises(NetworkError, match="not JSON"):
            await network.request("eth_call", [])

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(body: dict[str, Any]) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        network = make_network(handler, [])
        with pytest.raises(NetworkError, match="connection refused"):
            await network.request("eth_call", [])


class TestCall:
    @pytest.mark.asyncio
    async def test_call_params(self) -> None:
        requests: list[dict[str, Any]] = []
        network = make_network(rpc_result("0x"), requests)

        await network.call(to=TOKEN_ADDRESS, data="0xabcd", from_address=OWNER_ADDRESS, gas=30_000, block_tag=16)

        tx, block = requests[0]["params"]
        assert tx == {"to": TOKEN_ADDRESS, "data": "0xabcd", "from": OWNER_ADDRESS, "gas": "0x7530"}
        assert block == "0x10"

    @pytest.mark.asyncio
    async def test_contract_over_http(self) -> None:
        network = make_network(rpc_result(encode_response(["uint256"], [42])), [])
        contract = EthContract(network, TOKEN_ADDRESS, BALANCE_OF_ABI)

        async with network:
            assert await contract.execute_constant_function("balanceOf", [OWNER_ADDRESS]) == [42]


class TestTransactions:
    @pytest.mark.asyncio
    async def test_transaction_count_parsed(self) -> None:
        requests: list[dict[str, Any]] = []
        network = make_network(rpc_result("0x1f"), requests)

        assert await network.get_transaction_count(OWNER_ADDRESS, "pending") == 31
        assert requests[0]["params"] == [OWNER_ADDRESS, "pending"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("result", [None, "nonsense", 12])
    async def test_transaction_count_invalid(self, result: Any) -> None:
        network = make_network(rpc_result(result), [])
        assert await network.get_transaction_count(OWNER_ADDRESS) is None

    @pytest.mark.asyncio
    async def test_send_transaction_signs_locally(self) -> None:
        account = Account.create()
        tx_hash = "0x" + "ab" * 32
        requests: list[dict[str, Any]] = []
        network = make_network(rpc_result(tx_hash), requests, chain_id=84532)

        result = await network.send_transaction(
            wallet=account,
            to=TOKEN_ADDRESS,
            gas=60_000,
            gas_price=10**9,
            data="0xa9059cbb",
            nonce=4,
            value=0,
        )

        assert result == tx_hash
        assert requests[0]["method"] == "eth_sendRawTransaction"
        raw_tx = requests[0]["params"][0]
        assert raw_tx.startswith("0x")
        assert Account.recover_transaction(raw_tx) == account.address

    @pytest.mark.asyncio
    async def test_execute_function_over_http(self) -> None:
        account = Account.create()
        requests: list[dict[str, Any]] = []

        def handler(body: dict[str, Any]) -> httpx.Response:
            result = "0x2" if body["method"] == "eth_getTransactionCount" else "0x" + "cd" * 32
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

        network = make_network(handler, requests)
        contract = EthContract(
            network,
            TOKEN_ADDRESS,
            '[{"type":"function","name":"transfer","inputs":[{"name":"to","type":"address"},'
            '{"name":"amount","type":"uint256"}],"outputs":[{"name":"","type":"bool"}]}]',
        )

        tx_hash = await contract.execute_function(
            "transfer", account, [OWNER_ADDRESS, 1], gas=60_000, gas_price=1
        )

        assert tx_hash == "0x" + "cd" * 32
        assert [r["method"] for r in requests] == ["eth_getTransactionCount", "eth_sendRawTransaction"]
        assert requests[0]["params"] == [account.address, "latest"]


class TestBlockTag:
    @pytest.mark.parametrize(
        ("tag", "expected"),
        [(None, "latest"), ("pending", "pending"), ("earliest", "earliest"), (0, "0x0"), (255, "0xff")],
    )
    def test_format(self, tag: Any, expected: str) -> None:
        assert format_block_tag(tag) == expected

    @pytest.mark.parametrize("tag", ["finalized-ish", -1, True])
    def test_invalid(self, tag: Any) -> None:
        with pytest.raises(ValueError):
            format_block_tag(tag)
