from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Optional, Union

from eth_utils import to_checksum_address

BlockTag = Union[Literal["latest", "earliest", "pending"], int]

NAMED_BLOCK_TAGS = ("latest", "earliest", "pending")


def format_block_tag(block_tag: Optional[BlockTag]) -> str:
    """Render a block tag for JSON-RPC params (numbers as 0x-hex)."""
    if block_tag is None:
        return "latest"
    if isinstance(block_tag, bool):
        raise ValueError(f"Invalid block tag: {block_tag!r}")
    if isinstance(block_tag, int):
        if block_tag < 0:
            raise ValueError(f"Block number must be non-negative: {block_tag}")
        return hex(block_tag)
    if block_tag in NAMED_BLOCK_TAGS:
        return block_tag
    raise ValueError(
        f"Invalid block tag: {block_tag!r}. Use one of {', '.join(NAMED_BLOCK_TAGS)} or a block number."
    )


@dataclass(frozen=True)
class Address:
    """A decoded chain address; ``canonical`` is its EIP-55 form."""

    value: str

    @property
    def canonical(self) -> str:
        return to_checksum_address(self.value)

    def __str__(self) -> str:
        return self.canonical


@dataclass(frozen=True)
class TransactionIntent:
    to: str
    gas: int
    gas_price: int
    value: int
    data: str
    nonce: Optional[int] = None

    @property
    def needs_nonce(self) -> bool:
        return self.nonce is None

    def with_nonce(self, nonce: int) -> "TransactionIntent":
        return replace(self, nonce=nonce)
