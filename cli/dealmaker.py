"""
Dealmaker CLI
Make storage deals and check their status through a deployed DealClient
"""

import asyncio
from urllib.parse import urlparse

import click
from web3 import AsyncWeb3, AsyncHTTPProvider
from eth_account import Account
from eth_account.signers.local import LocalAccount
from multiformats import CID
from loguru import logger

from blockchain.deal_client import DealClient, DealRequest, ExtraParamsV1
from utils.logging_config import setup_logging


def parse_url(value: str) -> str:
    """Accept only absolute URLs (scheme and host)"""
    parsed = urlparse(value or '')
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"'{value}' is not a valid URL")
    return value


def parse_address(value: str) -> str:
    """Return the checksummed form of a hex address"""
    if not value or not AsyncWeb3.is_address(value):
        raise ValueError("contract is not an ETH address")
    return AsyncWeb3.to_checksum_address(value)


def parse_cid(value: str) -> CID:
    try:
        return CID.decode(value or '')
    except Exception as e:
        raise ValueError(f"'{value}' is not a valid CID: {e}") from e


def parse_private_key(value: str) -> LocalAccount:
    try:
        return Account.from_key(value or '')
    except ValueError as e:
        raise ValueError("invalid private key") from e


def _callback(parser):
    """Turn a parser's ValueError into a click usage error"""
    def callback(ctx, param, value):
        try:
            return parser(value)
        except ValueError as e:
            raise click.BadParameter(str(e), ctx=ctx, param=param) from e
    return callback


async def _closing(w3, coro):
    """Await a chain call, then close the provider session"""
    try:
        return await coro
    finally:
        await w3.provider.disconnect()


def _run(w3, coro):
    """Run a chain call, reporting failures as a CLI error"""
    try:
        return asyncio.run(_closing(w3, coro))
    except Exception as e:
        logger.debug(f"Chain call failed: {e!r}")
        raise click.ClickException(str(e)) from e


rpc_endpoint_option = click.option(
    '--rpc-endpoint', required=True, callback=_callback(parse_url), help="Gateway RPC endpoint"
)
contract_option = click.option(
    '--contract', required=True, callback=_callback(parse_address), help="The Smart Contract address"
)
piece_cid_option = click.option(
    '--piece-cid', required=True, callback=_callback(parse_cid), help="The piece CID"
)


@click.group()
@click.option('--log-level', default=None, help="Log level (default: $LOG_LEVEL or INFO)")
def dealmaker(log_level):
    """dealmaker lets you make deals using a FVM smart contract"""
    setup_logging(level=log_level)


@dealmaker.command()
@rpc_endpoint_option
@contract_option
@piece_cid_option
@click.option('--piece-size', type=click.IntRange(min=0), required=True, help="The piece size in bytes")
@click.option('--verified', is_flag=True, default=False, help="If it's a verified deal or not")
@click.option('--payload-cid', required=True, callback=_callback(parse_cid), help="The payload CID")
@click.option('--start-epoch', type=int, required=True, help="When the deal starts")
@click.option('--end-epoch', type=int, required=True, help="When the deal ends")
@click.option('--location-ref', required=True, callback=_callback(parse_url), help="Where the CAR file can be downloaded")
@click.option('--car-size', type=click.IntRange(min=0), required=True, help="The size of the CAR file")
@click.option('--private-key', required=True, callback=_callback(parse_private_key), help="The private key")
@click.option('--chain-id', type=int, default=None, help="The network id")
def create(rpc_endpoint, contract, piece_cid, piece_size, verified, payload_cid,
           start_epoch, end_epoch, location_ref, car_size, private_key, chain_id):
    """Create deal"""
    deal_request = DealRequest(
        piece_cid=bytes(piece_cid),
        piece_size=piece_size,
        verified_deal=verified,
        label=str(payload_cid),
        start_epoch=start_epoch,
        end_epoch=end_epoch,
        extra_params=ExtraParamsV1(location_ref=location_ref, car_size=car_size)
    )

    w3 = AsyncWeb3(AsyncHTTPProvider(rpc_endpoint))
    client = DealClient(w3, contract, account=private_key, chain_id=chain_id)

    tx_hash = _run(w3, client.make_deal_proposal(deal_request))
    click.echo(AsyncWeb3.to_hex(tx_hash))


@dealmaker.command()
@rpc_endpoint_option
@contract_option
@piece_cid_option
def status(rpc_endpoint, contract, piece_cid):
    """Check the status of a deal"""
    w3 = AsyncWeb3(AsyncHTTPProvider(rpc_endpoint))
    client = DealClient(w3, contract)

    deal_status = _run(w3, client.piece_status(bytes(piece_cid)))
    click.echo(deal_status.name)


if __name__ == "__main__":
    dealmaker()
