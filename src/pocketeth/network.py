"""
Network capability consumed by EthContract, plus an httpx JSON-RPC binding.

EthContract only depends on the EthNetwork protocol. HttpNetwork is the
binding used by the CLI: it signs locally with eth-account and talks
JSON-RPC 2.0 over httpx. Retries and timeouts are left to httpx.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional, Protocol

import httpx
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from .config import NetworkConfig
from .errors import NetworkError
from .types import BlockTag, format_block_tag

logger = logging.getLogger(__name__)


class Wallet(Protocol):
    @property
    def address(self) -> str:
        ...


class EthNetwork(Protocol):
    async def call(
        self,
        *,
        to: str,
        data: str,
        from_address: Optional[str] = None,
        gas: Optional[int] = None,
        gas_price: Optional[int] = None,
        value: Optional[int] = None,
        block_tag: Optional[BlockTag] = None,
    ) -> Optional[str]:
        ...

    async def get_transaction_count(
        self, address: str, block_tag: Optional[BlockTag] = None
    ) -> Optional[int]:
        ...

    async def send_transaction(
        self,
        *,
        wallet: Any,
        to: str,
        gas: int,
        gas_price: int,
        data: str,
        nonce: int,
        value: int = 0,
    ) -> str:
        ...


def _quantity(value: int) -> str:
    return hex(value)


def _parse_quantity(result: Any) -> Optional[int]:
    if not isinstance(result, str):
        return None
    try:
        return int(result, 16)
    except ValueError:
        return None


class HttpNetwork:
    """EthNetwork over JSON-RPC 2.0 (HTTP POST) using httpx.AsyncClient."""

    def __init__(
        self,
        config: Optional[NetworkConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or NetworkConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.config.timeout)
        self._ids = itertools.count(1)

    async def __aenter__(self) -> "HttpNetwork":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def request(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            NetworkError: On transport failure, HTTP error status or RPC error object
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        logger.debug("RPC %s -> %s", method, self.config.rpc_url)

        try:
            response = await self._client.post(self.config.rpc_url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise NetworkError(f"RPC request {method} failed: {exc}") from exc
        except ValueError as exc:
            raise NetworkError(f"RPC response for {method} is not JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise NetworkError(f"Unexpected JSON-RPC response for {method} (non-object).")

        error_obj = data.get("error")
        if error_obj is not None:
            if isinstance(error_obj, dict):
                code = error_obj.get("code")
                message = error_obj.get("message") or "unknown error"
                raise NetworkError(
                    f"RPC error {code}: {message}", code=code, data=error_obj.get("data")
                )
            raise NetworkError(f"RPC error: {error_obj}")

        return data.get("result")

    async def call(
        self,
        *,
        to: str,
        data: str,
        from_address: Optional[str] = None,
        gas: Optional[int] = None,
        gas_price: Optional[int] = None,
        value: Optional[int] = None,
        block_tag: Optional[BlockTag] = None,
    ) -> Optional[str]:
        tx: dict[str, str] = {"to": to, "data": data}
        if from_address is not None:
            tx["from"] = from_address
        if gas is not None:
            tx["gas"] = _quantity(gas)
        if gas_price is not None:
            tx["gasPrice"] = _quantity(gas_price)
        if value is not None:
            tx["value"] = _quantity(value)
        return await self.request("eth_call", [tx, format_block_tag(block_tag)])

    async def get_transaction_count(
        self, address: str, block_tag: Optional[BlockTag] = None
    ) -> Optional[int]:
        result = await self.request(
            "eth_getTransactionCount", [address, format_block_tag(block_tag)]
        )
        return _parse_quantity(result)

    async def send_transaction(
        self,
        *,
        wallet: LocalAccount,
        to: str,
        gas: int,
        gas_price: int,
        data: str,
        nonce: int,
        value: int = 0,
    ) -> str:
        """Sign with the wallet and broadcast via eth_sendRawTransaction."""
        tx = {
            "to": to_checksum_address(to),
            "data": data,
            "value": value,
            "nonce": nonce,
            "gas": gas,
            "gasPrice": gas_price,
            "chainId": self.config.chain_id,
        }
        signed = wallet.sign_transaction(tx)
        raw_tx = "0x" + bytes(signed.raw_transaction).hex()
        tx_hash = await self.request("eth_sendRawTransaction", [raw_tx])
        if not isinstance(tx_hash, str) or not tx_hash:
            raise NetworkError(f"eth_sendRawTransaction returned unexpected result: {tx_hash!r}")
        return tx_hash
