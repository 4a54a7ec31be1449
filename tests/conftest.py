"""Shared fixtures: ABI documents and a recording fake network."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Optional

import pytest
from eth_abi import encode

TOKEN_ADDRESS = "0x" + "11" * 20
OWNER_ADDRESS = "0x" + "22" * 20

BALANCE_OF_ABI = json.dumps(
    [
        {
            "type": "function",
            "name": "balanceOf",
            "inputs": [{"name": "owner", "type": "address"}],
            "outputs": [{"name": "balance", "type": "uint256"}],
        }
    ]
)

TOKEN_ABI = [
    {
        "type": "constructor",
        "inputs": [{"name": "supply", "type": "uint256"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
    {"type": "fallback", "stateMutability": "payable"},
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "balance", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "transfer",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "info",
        "inputs": [],
        "outputs": [
            {"name": "symbol", "type": "string"},
            {"name": "admin", "type": "address"},
            {"name": "digest", "type": "bytes32"},
            {"name": "decimals", "type": "uint8"},
        ],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "inputs": [],
        "outputs": [],
    },
]


def encode_response(types: list[str], values: list[Any]) -> str:
    return "0x" + encode(types, values).hex()


@dataclass
class FakeWallet:
    address: str


@dataclass
class FakeNetwork:
    """EthNetwork double that records every invocation in order."""

    call_response: Optional[str] = None
    transaction_count: Any = 7
    error: Optional[Exception] = None
    events: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    async def __aenter__(self) -> "FakeNetwork":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None

    def methods(self) -> list[str]:
        return [method for method, _ in self.events]

    async def call(self, **kwargs: Any) -> Optional[str]:
        self.events.append(("call", kwargs))
        if self.error is not None:
            raise self.error
        return self.call_response

    async def get_transaction_count(self, address: str, block_tag: Any = None) -> Any:
        self.events.append(("get_transaction_count", {"address": address, "block_tag": block_tag}))
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.transaction_count

    async def send_transaction(self, **kwargs: Any) -> str:
        self.events.append(("send_transaction", kwargs))
        await asyncio.sleep(0)
        return "0x" + f"{kwargs['nonce']:064x}"


@pytest.fixture()
def token_abi() -> str:
    return json.dumps(TOKEN_ABI)


@pytest.fixture()
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture()
def wallet() -> FakeWallet:
    return FakeWallet(address=OWNER_ADDRESS)
