from __future__ import annotations

from typing import Any, Mapping

from ..types import Address


def normalize_value(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, Address):
        return value.canonical
    return value


def normalize_result(decoded: Mapping[str, Any]) -> list[Any]:
    """
    Order decoded outputs by name and canonicalize binary/address values.

    The result never depends on the mapping's insertion order.
    """
    return [normalize_value(decoded[name]) for name in sorted(decoded)]
