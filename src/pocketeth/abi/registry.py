"""
ABI Registry - Parse an ABI document into function descriptors.

Accepts a bare ABI array or a build artifact (Foundry/Hardhat) with an
``abi`` key. Only named ``function`` entries reach the function table;
constructors, events, errors, fallback and receive entries are parsed
but never indexed.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union

from eth_abi import is_encodable_type

from ..errors import InvalidAbiDocumentError, InvalidAbiEncodingError
from .schema import AbiSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AbiParameter:
    name: str
    type: str
    components: tuple["AbiParameter", ...] = ()
    indexed: bool = False

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "AbiParameter":
        components = tuple(cls.from_dict(c) for c in payload.get("components", []))
        param = cls(
            name=payload.get("name") or "",
            type=payload["type"],
            components=components,
            indexed=payload.get("indexed", False),
        )
        if param.is_tuple and not components:
            raise ValueError(f"Tuple parameter '{param.name}' has no components")
        if not is_encodable_type(param.canonical_type):
            raise ValueError(f"Unsupported ABI type '{param.type}' for parameter '{param.name}'")
        return param

    @property
    def is_tuple(self) -> bool:
        return self.type.startswith("tuple")

    @property
    def canonical_type(self) -> str:
        """ABI type string with tuples expanded, e.g. ``(uint256,address)[]``."""
        if not self.is_tuple:
            return self.type
        suffix = self.type[len("tuple"):]
        inner = ",".join(c.canonical_type for c in self.components)
        return f"({inner}){suffix}"


@dataclass(frozen=True)
class FunctionDescriptor:
    name: Optional[str]
    inputs: tuple[AbiParameter, ...] = ()
    outputs: tuple[AbiParameter, ...] = ()
    state_mutability: str = "nonpayable"

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "FunctionDescriptor":
        return cls(
            name=payload.get("name") or None,
            inputs=tuple(AbiParameter.from_dict(p) for p in payload.get("inputs", [])),
            outputs=tuple(AbiParameter.from_dict(p) for p in payload.get("outputs", [])),
            state_mutability=_state_mutability(payload),
        )

    @property
    def input_types(self) -> list[str]:
        return [p.canonical_type for p in self.inputs]

    @property
    def output_types(self) -> list[str]:
        return [p.canonical_type for p in self.outputs]

    @property
    def output_names(self) -> list[str]:
        """Declared output names; unnamed outputs use their position."""
        return [p.name or str(i) for i, p in enumerate(self.outputs)]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def is_constant(self) -> bool:
        return self.state_mutability in ("view", "pure")


@dataclass(frozen=True)
class AbiEntry:
    """Any non-function ABI element (constructor, event, error, ...)."""

    type: str
    name: Optional[str] = None
    inputs: tuple[AbiParameter, ...] = field(default=())

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "AbiEntry":
        return cls(
            type=payload["type"],
            name=payload.get("name"),
            inputs=tuple(AbiParameter.from_dict(p) for p in payload.get("inputs", [])),
        )


AbiElement = Union[FunctionDescriptor, AbiEntry]


def _state_mutability(payload: dict[str, Any]) -> str:
    if "stateMutability" in payload:
        return payload["stateMutability"]
    # Pre-0.4.16 compilers only emit constant/payable flags
    if payload.get("constant"):
        return "view"
    if payload.get("payable"):
        return "payable"
    return "nonpayable"


def _decode_text(document: Union[str, bytes, bytearray]) -> str:
    if isinstance(document, (bytes, bytearray)):
        try:
            return bytes(document).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidAbiEncodingError(f"ABI definition is not valid UTF-8: {exc}") from exc
    if not isinstance(document, str):
        raise InvalidAbiEncodingError(
            f"ABI definition must be str or bytes, got {type(document).__name__}"
        )
    return document


def parse_abi(
    document: Union[str, bytes, bytearray],
    schema: Optional[AbiSchema] = None,
) -> list[AbiElement]:
    """
    Parse an ABI document into typed elements.

    Args:
        document: ABI JSON text (or UTF-8 bytes)
        schema: Record schema (default: bundled ABI record schema)

    Returns:
        Parsed elements in declaration order

    Raises:
        InvalidAbiEncodingError: If bytes are not valid UTF-8
        InvalidAbiDocumentError: If the JSON or any record is invalid
    """
    text = _decode_text(document)
    schema = schema or AbiSchema.default()

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidAbiDocumentError(f"Error parsing ABI definition JSON: {exc}") from exc

    if isinstance(payload, dict) and "abi" in payload:
        payload = payload["abi"]
    if not isinstance(payload, list):
        raise InvalidAbiDocumentError(
            f"ABI definition must be a JSON array, got {type(payload).__name__}"
        )

    elements: list[AbiElement] = []
    for index, record in enumerate(payload):
        schema.validate_record(record, index)
        try:
            if record.get("type", "function") == "function":
                elements.append(FunctionDescriptor.from_dict(record))
            else:
                elements.append(AbiEntry.from_dict(record))
        except (KeyError, ValueError) as exc:
            raise InvalidAbiDocumentError(f"ABI record {index} is invalid: {exc}") from exc

    return elements


def build_function_table(elements: Iterable[AbiElement]) -> dict[str, FunctionDescriptor]:
    """Index named functions by name. Duplicates: last one wins."""
    table: dict[str, FunctionDescriptor] = {}
    for element in elements:
        if not isinstance(element, FunctionDescriptor):
            continue
        if not element.name:
            logger.warning("Skipping unnamed ABI function entry")
            continue
        if element.name in table:
            logger.warning(
                "Duplicate ABI function %s: %s replaces %s",
                element.name,
                element.signature,
                table[element.name].signature,
            )
        table[element.name] = element
    return table
