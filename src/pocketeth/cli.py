"""
pocketeth CLI

Commands:
  functions - List the functions declared in an ABI file
  encode    - Print calldata for a function call
  call      - Execute a read-only function (eth_call)
  send      - Execute a function as a signed transaction
  whoami    - Show the configured wallet address
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any, NoReturn, Optional

import click

from .abi.codec import EthAbiCodec, FunctionCodec
from .abi.normalize import normalize_value
from .abi.registry import FunctionDescriptor, build_function_table, parse_abi
from .config import get_wallet, load_config, load_private_key
from .contract import EthContract
from .errors import ContractError
from .network import HttpNetwork

VERSION = "0.3.0"

abi_option = click.option(
    "--abi",
    "abi_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="ABI JSON file (bare array or build artifact)",
)
function_option = click.option("--function", "func_name", required=True, help="Function name")
args_option = click.option("--args", "args_json", default="[]", help="Function args as JSON array")
contract_option = click.option("--contract", required=True, help="Contract address")


def _fail(message: str) -> NoReturn:
    click.secho(f"ERROR: {message}", fg="red", err=True)
    sys.exit(1)


def _parse_args(args_json: str) -> list:
    try:
        args = json.loads(args_json)
        if not isinstance(args, list):
            raise ValueError("Args must be a JSON array")
    except (json.JSONDecodeError, ValueError) as exc:
        _fail(f"Invalid args: {exc}")
    return args


def _parse_block(block: Optional[str]) -> Any:
    if block is None or not block.isdigit():
        return block
    return int(block)


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    normalized = normalize_value(value)
    if normalized is value:
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
    return normalized


def _load_functions(abi_path: Path) -> dict[str, FunctionDescriptor]:
    try:
        return build_function_table(parse_abi(abi_path.read_bytes()))
    except ContractError as exc:
        _fail(str(exc))


@click.group()
@click.version_option(version=VERSION, prog_name="pocketeth")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """pocketeth - Execute smart-contract functions from an ABI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@abi_option
def functions(abi_path: Path) -> None:
    """List function signatures declared in the ABI."""
    table = _load_functions(abi_path)
    for name in sorted(table):
        descriptor = table[name]
        outputs = ",".join(descriptor.output_types)
        click.echo(f"{descriptor.signature} -> ({outputs}) [{descriptor.state_mutability}]")


@cli.command()
@abi_option
@function_option
@args_option
def encode(abi_path: Path, func_name: str, args_json: str) -> None:
    """Print 0x-prefixed calldata for a function call."""
    table = _load_functions(abi_path)
    args = _parse_args(args_json)
    if func_name not in table:
        _fail(f"Invalid function name: {func_name}")
    try:
        click.echo(FunctionCodec(EthAbiCodec(), table[func_name]).encode_hex(args))
    except ContractError as exc:
        _fail(str(exc))


@cli.command()
@abi_option
@contract_option
@function_option
@args_option
@click.option("--from", "from_address", default=None, help="Sender address")
@click.option("--block", default=None, help="latest, earliest, pending or a block number")
def call(
    abi_path: Path,
    contract: str,
    func_name: str,
    args_json: str,
    from_address: Optional[str],
    block: Optional[str],
) -> None:
    """Execute a read-only function and print the result as JSON."""
    args = _parse_args(args_json)

    async def _run() -> list:
        async with HttpNetwork(load_config()) as network:
            eth_contract = EthContract(network, contract, abi_path.read_bytes())
            return await eth_contract.execute_constant_function(
                func_name,
                args,
                from_address=from_address,
                block_tag=_parse_block(block),
            )

    try:
        result = asyncio.run(_run())
    except (ContractError, ValueError) as exc:
        _fail(str(exc))

    try:
        output = json.dumps(result, default=_json_default)
    except TypeError as exc:
        _fail(f"Cannot render result: {exc}")
    click.echo(output)


@cli.command()
@abi_option
@contract_option
@function_option
@args_option
@click.option("--gas", default=500_000, type=int, help="Gas limit")
@click.option("--gas-price", required=True, type=int, help="Gas price in wei")
@click.option("--value", default=0, type=int, help="Value in wei")
@click.option("--nonce", default=None, type=int, help="Nonce (default: fetched from the node)")
def send(
    abi_path: Path,
    contract: str,
    func_name: str,
    args_json: str,
    gas: int,
    gas_price: int,
    value: int,
    nonce: Optional[int],
) -> None:
    """Sign and send a transaction with the configured wallet."""
    args = _parse_args(args_json)

    try:
        wallet = get_wallet(load_private_key())
    except ValueError as exc:
        _fail(str(exc))

    click.echo(f"  Sender: {wallet.address}")
    click.echo(f"  Target: {contract}")
    click.echo(f"  Function: {func_name}")
    click.echo(f"  Args: {args}")

    async def _run() -> str:
        async with HttpNetwork(load_config()) as network:
            eth_contract = EthContract(network, contract, abi_path.read_bytes())
            return await eth_contract.execute_function(
                func_name,
                wallet,
                args,
                nonce=nonce,
                gas=gas,
                gas_price=gas_price,
                value=value,
            )

    try:
        tx_hash = asyncio.run(_run())
    except (ContractError, ValueError) as exc:
        _fail(str(exc))

    click.secho("Transaction sent", fg="green")
    click.echo(f"  TX: {tx_hash}")


@cli.command()
def whoami() -> None:
    """Show the configured wallet address."""
    try:
        wallet = get_wallet(load_private_key())
    except ValueError as exc:
        _fail(str(exc))
    click.echo(f"Address: {wallet.address}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
