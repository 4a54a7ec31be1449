"""
Configuration - RPC endpoint, chain id and wallet key.

Values come from the process environment, with ~/.pocketeth/.env loaded
first when it exists.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

POCKETETH_DIR = Path.home() / ".pocketeth"
POCKETETH_ENV = POCKETETH_DIR / ".env"

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_CHAIN_ID = 1
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class NetworkConfig:
    rpc_url: str = DEFAULT_RPC_URL
    chain_id: int = DEFAULT_CHAIN_ID
    timeout: float = DEFAULT_TIMEOUT


def load_env(env_path: Optional[Path] = None) -> None:
    env_path = env_path or POCKETETH_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)


def load_config(env_path: Optional[Path] = None) -> NetworkConfig:
    """
    Load network configuration from the environment.

    Raises:
        ValueError: If CHAIN_ID or POCKETETH_RPC_TIMEOUT is not numeric
    """
    load_env(env_path)

    rpc_url = os.environ.get("POCKETETH_RPC_URL", DEFAULT_RPC_URL).strip()
    if not rpc_url:
        raise ValueError("POCKETETH_RPC_URL must be a non-empty string.")

    try:
        chain_id = int(os.environ.get("CHAIN_ID", str(DEFAULT_CHAIN_ID)))
        timeout = float(os.environ.get("POCKETETH_RPC_TIMEOUT", str(DEFAULT_TIMEOUT)))
    except ValueError as exc:
        raise ValueError(f"Invalid network configuration: {exc}") from exc

    return NetworkConfig(rpc_url=rpc_url.rstrip("/"), chain_id=chain_id, timeout=timeout)


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load the wallet private key from .env or the environment.

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not set
    """
    env_path = env_path or POCKETETH_ENV
    load_env(env_path)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(f"PRIVATE_KEY not found. Set PRIVATE_KEY in the environment or {env_path}")

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_wallet(private_key: Optional[str] = None) -> LocalAccount:
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)
