"""
Codec adapter over eth-abi.

The byte-level packing rules belong to eth-abi; this module only scopes
encode/decode to a FunctionDescriptor and maps failures onto the
package's error taxonomy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError, ParseError
from eth_hash.auto import keccak

from ..errors import DecodingFailedError, EncodingFailedError
from ..types import Address
from .registry import FunctionDescriptor

HEX_PREFIX = "0x"


class Codec(Protocol):
    def encode(self, descriptor: FunctionDescriptor, params: Sequence[Any]) -> bytes:
        ...

    def decode(self, descriptor: FunctionDescriptor, data: bytes) -> dict[str, Any]:
        ...


def function_selector(descriptor: FunctionDescriptor) -> bytes:
    """First 4 bytes of keccak256 over the canonical signature."""
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(descriptor.signature.encode("utf-8"))[:4]


class EthAbiCodec:
    """Codec backed by eth_abi.encode / eth_abi.decode."""

    def encode(self, descriptor: FunctionDescriptor, params: Sequence[Any]) -> bytes:
        input_types = descriptor.input_types
        if len(params) != len(input_types):
            raise EncodingFailedError(
                str(descriptor.name),
                params,
                f"expected {len(input_types)} arguments, got {len(params)}",
            )
        try:
            encoded_args = encode(input_types, list(params)) if input_types else b""
        except (EncodingError, ParseError, TypeError, ValueError, OverflowError) as exc:
            raise EncodingFailedError(str(descriptor.name), params, str(exc)) from exc
        return function_selector(descriptor) + encoded_args

    def decode(self, descriptor: FunctionDescriptor, data: bytes) -> dict[str, Any]:
        output_types = descriptor.output_types
        if not output_types:
            return {}
        try:
            values = decode(output_types, data)
        except (DecodingError, ParseError, TypeError, ValueError) as exc:
            raise DecodingFailedError(
                f"Error decoding response for {descriptor.name}: {exc}"
            ) from exc

        decoded: dict[str, Any] = {}
        for name, abi_type, value in zip(descriptor.output_names, output_types, values):
            if abi_type == "address":
                value = Address(value)
            decoded[name] = value
        return decoded


def hex_to_bytes(data: str) -> bytes:
    """Convert a 0x-prefixed hex response into bytes."""
    raw = data[2:] if data.startswith(HEX_PREFIX) else data
    try:
        return bytes.fromhex(raw)
    except ValueError as exc:
        raise DecodingFailedError(f"Invalid response hex: {data!r}") from exc


@dataclass(frozen=True)
class FunctionCodec:
    """Encode/decode scoped to a single function."""

    codec: Codec
    descriptor: FunctionDescriptor

    def encode(self, params: Sequence[Any]) -> bytes:
        return self.codec.encode(self.descriptor, params)

    def encode_hex(self, params: Sequence[Any]) -> str:
        return HEX_PREFIX + self.encode(params).hex()

    def decode(self, data: bytes) -> dict[str, Any]:
        return self.codec.decode(self.descriptor, data)

    def decode_hex(self, data: str) -> dict[str, Any]:
        return self.decode(hex_to_bytes(data))
