"""
ABI layer - registry, codec adapter and result normalizer.

Uses eth-abi for byte-level encoding and jsonschema for record validation.
"""

from .codec import Codec, EthAbiCodec, FunctionCodec, function_selector, hex_to_bytes
from .normalize import normalize_result, normalize_value
from .registry import (
    AbiElement,
    AbiEntry,
    AbiParameter,
    FunctionDescriptor,
    build_function_table,
    parse_abi,
)
from .schema import AbiSchema

__all__ = [
    "AbiElement",
    "AbiEntry",
    "AbiParameter",
    "AbiSchema",
    "Codec",
    "EthAbiCodec",
    "FunctionCodec",
    "FunctionDescriptor",
    "build_function_table",
    "function_selector",
    "hex_to_bytes",
    "normalize_result",
    "normalize_value",
    "parse_abi",
]
