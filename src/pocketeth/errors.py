"""
Error taxonomy for contract execution.

Construction errors (ABI parsing) abort the EthContract entirely.
Invocation errors only fail the single call that raised them.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


class ContractError(Exception):
    pass


class InvalidAbiDocumentError(ContractError):
    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class InvalidAbiEncodingError(ContractError):
    pass


class UnknownFunctionError(ContractError):
    def __init__(self, function_name: str) -> None:
        super().__init__(f"Invalid function name: {function_name}")
        self.function_name = function_name


class EncodingFailedError(ContractError):
    def __init__(self, function_name: str, params: Sequence[Any], reason: str) -> None:
        super().__init__(
            f"Invalid function data for {function_name} params {list(params)!r}: {reason}"
        )
        self.function_name = function_name
        self.params = list(params)


class EmptyResponseError(ContractError):
    pass


class DecodingFailedError(ContractError):
    pass


class InvalidNonceError(ContractError):
    pass


class NetworkError(ContractError):
    """Raised by network bindings for transport and JSON-RPC failures."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.data = data
