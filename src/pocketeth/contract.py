"""
EthContract - Execute ABI functions against a deployed contract.

Two execution modes:
- execute_constant_function: eth_call, decoded and normalized result
- execute_function: signed transaction, returns the transaction hash

The function table is built once at construction and never mutated, so a
single EthContract can serve concurrent invocations without locking.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence, Union

from .abi.codec import Codec, EthAbiCodec, FunctionCodec
from .abi.normalize import normalize_result
from .abi.registry import FunctionDescriptor, build_function_table, parse_abi
from .errors import EmptyResponseError, InvalidNonceError, UnknownFunctionError
from .network import EthNetwork, Wallet
from .types import BlockTag, TransactionIntent

logger = logging.getLogger(__name__)


class EthContract:
    def __init__(
        self,
        network: EthNetwork,
        address: str,
        abi_definition: Union[str, bytes],
        codec: Optional[Codec] = None,
    ) -> None:
        """
        Build a contract handle from its ABI definition.

        Args:
            network: Network capability (shared, not owned)
            address: 0x-prefixed contract address
            abi_definition: ABI JSON text, or UTF-8 bytes
            codec: Parameter codec (default: eth-abi)

        Raises:
            ValueError: If address is empty
            InvalidAbiEncodingError: If abi_definition bytes are not UTF-8
            InvalidAbiDocumentError: If the ABI JSON or a record is invalid
        """
        if not isinstance(address, str) or not address.strip():
            raise ValueError("address must be a non-empty string.")

        self._network = network
        self._address = address.strip()
        self._codec = codec or EthAbiCodec()
        self._functions: Mapping[str, FunctionDescriptor] = MappingProxyType(
            build_function_table(parse_abi(abi_definition))
        )
        logger.debug("Loaded %d functions for contract %s", len(self._functions), self._address)

    @property
    def address(self) -> str:
        return self._address

    @property
    def network(self) -> EthNetwork:
        return self._network

    @property
    def functions(self) -> Mapping[str, FunctionDescriptor]:
        return self._functions

    @property
    def function_names(self) -> list[str]:
        return sorted(self._functions)

    def get_function(self, function_name: str) -> FunctionDescriptor:
        try:
            return self._functions[function_name]
        except KeyError:
            raise UnknownFunctionError(function_name) from None

    def encode_function_data(self, function_name: str, params: Sequence[Any] = ()) -> str:
        """Return the 0x-prefixed calldata for a function call."""
        return self._function_codec(function_name).encode_hex(params)

    def _function_codec(self, function_name: str) -> FunctionCodec:
        return FunctionCodec(self._codec, self.get_function(function_name))

    async def execute_constant_function(
        self,
        function_name: str,
        params: Sequence[Any] = (),
        *,
        from_address: Optional[str] = None,
        gas: Optional[int] = None,
        gas_price: Optional[int] = None,
        value: Optional[int] = None,
        block_tag: Optional[BlockTag] = None,
    ) -> list[Any]:
        """
        Execute a read-only function via eth_call.

        Args:
            function_name: Function name in the ABI
            params: Function arguments
            from_address: Sender address (optional)
            gas: Gas limit in wei (optional)
            gas_price: Gas price in wei (optional)
            value: Value to send in wei (optional)
            block_tag: "latest", "earliest", "pending" or a block number

        Returns:
            Output values ordered by output name; bytes as hex, addresses checksummed

        Raises:
            UnknownFunctionError: Before any network call, if the name is not in the ABI
            EncodingFailedError: If params do not match the declared inputs
            EmptyResponseError: If the node returned no data
            DecodingFailedError: If the response does not match the declared outputs
        """
        function_codec = self._function_codec(function_name)
        data = function_codec.encode_hex(params)
        logger.debug("eth_call %s on %s (%d bytes)", function_name, self._address, len(data) // 2 - 1)

        response = await self._network.call(
            to=self._address,
            data=data,
            from_address=from_address,
            gas=gas,
            gas_price=gas_price,
            value=value,
            block_tag=block_tag,
        )

        if not response or response == "0x":
            raise EmptyResponseError(
                f"Invalid response hex for {function_name}: {response or 'No data returned'}"
            )

        return normalize_result(function_codec.decode_hex(response))

    async def execute_function(
        self,
        function_name: str,
        wallet: Wallet,
        params: Sequence[Any] = (),
        *,
        nonce: Optional[int] = None,
        gas: int,
        gas_price: int,
        value: int = 0,
    ) -> str:
        """
        Execute a state-changing function as a signed transaction.

        When nonce is omitted, the sender's transaction count at the latest
        block is fetched first and used as the nonce.

        Args:
            function_name: Function name in the ABI
            wallet: Sender wallet (signing is done by the network capability)
            params: Function arguments
            nonce: Transaction count of the sender (optional)
            gas: Gas limit
            gas_price: Gas price in wei
            value: Value to send in wei

        Returns:
            Transaction hash

        Raises:
            UnknownFunctionError: If the name is not in the ABI
            EncodingFailedError: If params do not match the declared inputs
            InvalidNonceError: If the fetched transaction count is missing or invalid
        """
        data = self._function_codec(function_name).encode_hex(params)
        intent = TransactionIntent(
            to=self._address,
            gas=gas,
            gas_price=gas_price,
            value=value,
            data=data,
            nonce=nonce,
        )

        if intent.needs_nonce:
            intent = intent.with_nonce(await self._resolve_nonce(wallet))

        tx_hash = await self._network.send_transaction(
            wallet=wallet,
            to=intent.to,
            gas=intent.gas,
            gas_price=intent.gas_price,
            data=intent.data,
            nonce=intent.nonce,
            value=intent.value,
        )
        logger.info("Sent %s to %s (nonce %d): %s", function_name, self._address, intent.nonce, tx_hash)
        return tx_hash

    async def _resolve_nonce(self, wallet: Wallet) -> int:
        count = await self._network.get_transaction_count(wallet.address, "latest")
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise InvalidNonceError(f"Invalid transaction count: {count!r}")
        logger.debug("Resolved nonce %d for %s", count, wallet.address)
        return count
