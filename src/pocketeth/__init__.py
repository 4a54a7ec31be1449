__all__ = [
    # Contract execution
    "EthContract",
    # Network
    "EthNetwork",
    "HttpNetwork",
    "Wallet",
    # ABI
    "AbiParameter",
    "FunctionDescriptor",
    "EthAbiCodec",
    "parse_abi",
    "build_function_table",
    "normalize_result",
    # Types
    "Address",
    "BlockTag",
    "TransactionIntent",
    # Config
    "NetworkConfig",
    "load_config",
    "get_wallet",
    # Errors
    "ContractError",
    "InvalidAbiDocumentError",
    "InvalidAbiEncodingError",
    "UnknownFunctionError",
    "EncodingFailedError",
    "EmptyResponseError",
    "DecodingFailedError",
    "InvalidNonceError",
    "NetworkError",
]

from .abi.codec import EthAbiCodec
from .abi.normalize import normalize_result
from .abi.registry import AbiParameter, FunctionDescriptor, build_function_table, parse_abi
from .config import NetworkConfig, get_wallet, load_config
from .contract import EthContract
from .errors import (
    ContractError,
    DecodingFailedError,
    EmptyResponseError,
    EncodingFailedError,
    InvalidAbiDocumentError,
    InvalidAbiEncodingError,
    InvalidNonceError,
    NetworkError,
    UnknownFunctionError,
)
from .network import EthNetwork, HttpNetwork, Wallet
from .types import Address, BlockTag, TransactionIntent
