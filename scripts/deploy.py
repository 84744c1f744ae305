"""
DealClient Deployment Script
Deploys one DealClient instance to the configured network
"""

import sys
import asyncio
from typing import Optional
from loguru import logger

from blockchain.network import Network
from utils.logging_config import setup_logging


CONTRACT_NAME = "DealClient"


async def main(network: Optional[Network] = None):
    """Deploy DealClient and print its address"""
    network = network or Network.from_env()

    try:
        Contract = await network.get_contract_factory(CONTRACT_NAME)
        contract = await Contract.deploy()

        print(f"Deployed to {contract.address}")
    finally:
        await network.disconnect()


def run(network: Optional[Network] = None) -> int:
    """
    Run the deployment as a single task

    Every failure in the chain ends up here, once.

    Returns:
        Process exit code (0 = deployed, 1 = failed)
    """
    setup_logging()

    try:
        asyncio.run(main(network))
    except Exception as e:
        logger.error(f"Deployment failed: {type(e).__name__}: {e}")
        return 1

    return 0


def cli():
    """Console script entry point"""
    sys.exit(run())


if __name__ == "__main__":
    cli()
