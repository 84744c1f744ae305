"""
Network Runtime
Resolves the target network, signer, and compiled artifacts for deployments

The config file defaults to config/network_config.json (override with
$DEALCLIENT_CONFIG). Relative paths, including each network's
artifacts_dir, resolve against the working directory, i.e. the Hardhat
project root.
"""

import os
import json
from typing import Dict, Optional
from web3 import AsyncWeb3, AsyncHTTPProvider
from eth_account import Account
from eth_account.signers.local import LocalAccount
from loguru import logger
from dotenv import load_dotenv

from .contract_factory import ContractFactory, load_artifact
from .exceptions import ConfigurationError


DEFAULT_CONFIG_PATH = "config/network_config.json"


def load_network_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict:
    """Read the JSON network configuration"""
    if not os.path.exists(config_path):
        raise ConfigurationError(f"Network config not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid network config {config_path}: {e}") from e


class Network:
    """
    Connection to one configured network plus the account that signs for it

    Plays the role the development framework's runtime plays for JS deploy
    scripts: hands out contract factories bound to the network and signer.
    """

    def __init__(
        self,
        name: str,
        w3: AsyncWeb3,
        account: LocalAccount,
        chain_id: Optional[int] = None,
        artifacts_dir: str = "artifacts",
        gas_settings: Optional[Dict] = None,
        receipt_timeout: Optional[float] = None
    ):
        self.name = name
        self.w3 = w3
        self.account = account
        self.chain_id = chain_id
        self.artifacts_dir = artifacts_dir
        self.gas_settings = gas_settings or {}
        self.receipt_timeout = receipt_timeout

    @classmethod
    def from_env(cls, network_name: Optional[str] = None, config_path: Optional[str] = None) -> 'Network':
        """
        Build a Network from .env and the JSON network config

        Args:
            network_name: Network key in the config (default: $DEPLOY_NETWORK,
                then the config's default_network)
            config_path: Path to network_config.json (default: $DEALCLIENT_CONFIG,
                then config/network_config.json)

        Raises:
            ConfigurationError: unknown network, missing RPC URL or private key
        """
        load_dotenv()

        config_path = config_path or os.getenv('DEALCLIENT_CONFIG', DEFAULT_CONFIG_PATH)
        config = load_network_config(config_path)
        name = network_name or os.getenv('DEPLOY_NETWORK') or config.get('default_network')
        networks = config.get('networks', {})

        if name not in networks:
            raise ConfigurationError(
                f"Unknown network '{name}' (configured: {', '.join(sorted(networks)) or 'none'})"
            )

        network_config = networks[name]

        rpc_url = None
        if network_config.get('rpc_url_env'):
            rpc_url = os.getenv(network_config['rpc_url_env'])
        rpc_url = rpc_url or network_config.get('rpc_url')

        if not rpc_url:
            raise ConfigurationError(f"{network_config.get('rpc_url_env', 'rpc_url')} must be set for network '{name}'")

        private_key_env = network_config.get('private_key_env', 'PRIVATE_KEY')
        private_key = os.getenv(private_key_env)

        if not private_key:
            raise ConfigurationError(f"{private_key_env} must be set in .env")

        try:
            account = Account.from_key(private_key)
        except ValueError as e:
            raise ConfigurationError(f"{private_key_env} is not a valid private key") from e

        w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))

        logger.info(f"Network: {name} (chain {network_config.get('chain_id', 'auto')})")
        logger.info(f"Signer: {account.address}")

        return cls(
            name,
            w3,
            account,
            chain_id=network_config.get('chain_id'),
            artifacts_dir=network_config.get('artifacts_dir', 'artifacts'),
            gas_settings=network_config.get('gas_settings'),
            receipt_timeout=network_config.get('receipt_timeout')
        )

    async def get_contract_factory(self, contract_name: str) -> ContractFactory:
        """
        Get a factory for a compiled contract

        Raises:
            ArtifactNotFoundError: no deployable artifact with that name
        """
        artifact = load_artifact(contract_name, self.artifacts_dir)

        return ContractFactory(
            self.w3,
            self.account,
            contract_name,
            artifact['abi'],
            artifact['bytecode'],
            chain_id=self.chain_id,
            gas_settings=self.gas_settings,
            receipt_timeout=self.receipt_timeout
        )

    def get_contract(self, contract_name: str, address: str):
        """Bind an existing deployment to its artifact ABI"""
        artifact = load_artifact(contract_name, self.artifacts_dir)

        return self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(address),
            abi=artifact['abi']
        )

    async def disconnect(self):
        """Close the provider's HTTP session"""
        await self.w3.provider.disconnect()
