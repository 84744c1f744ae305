"""
Contract Factory
Loads compiled Hardhat artifacts and deploys new contract instances
"""

import os
import json
from typing import Dict, List, Optional
from web3 import AsyncWeb3
from web3.exceptions import Web3Exception
from eth_account.signers.local import LocalAccount
from loguru import logger

from utils.gas_calculator import GasCalculator
from .exceptions import ArtifactNotFoundError, DeploymentFailedError


def find_artifact_path(contract_name: str, artifacts_dir: str = "artifacts") -> Optional[str]:
    """
    Locate <Name>.sol/<Name>.json under a Hardhat artifacts directory

    Build-info and debug files are skipped. Returns None when nothing matches.
    """
    filename = f"{contract_name}.json"

    for root, dirs, files in os.walk(artifacts_dir):
        dirs[:] = sorted(d for d in dirs if d != 'build-info')

        if filename in files and os.path.basename(root).endswith('.sol'):
            return os.path.join(root, filename)

    return None


def load_artifact(contract_name: str, artifacts_dir: str = "artifacts") -> Dict:
    """
    Load a compiled contract artifact

    Args:
        contract_name: Contract name as written in Solidity
        artifacts_dir: Root of the compiler output

    Returns:
        Artifact dict with at least 'abi' and 'bytecode'

    Raises:
        ArtifactNotFoundError: missing, malformed, or abstract contract
    """
    artifact_path = find_artifact_path(contract_name, artifacts_dir)

    if artifact_path is None:
        raise ArtifactNotFoundError(contract_name, artifacts_dir, "run 'npx hardhat compile' first")

    with open(artifact_path, 'r') as f:
        try:
            artifact = json.load(f)
        except json.JSONDecodeError as e:
            raise ArtifactNotFoundError(contract_name, artifacts_dir, f"invalid JSON in {artifact_path}") from e

    if artifact.get('contractName', contract_name) != contract_name:
        raise ArtifactNotFoundError(
            contract_name, artifacts_dir,
            f"{artifact_path} holds {artifact['contractName']}"
        )

    if 'abi' not in artifact or 'bytecode' not in artifact:
        raise ArtifactNotFoundError(contract_name, artifacts_dir, f"{artifact_path} has no abi/bytecode")

    if artifact['bytecode'] in ('', '0x'):
        raise ArtifactNotFoundError(contract_name, artifacts_dir, "contract is abstract or an interface")

    logger.debug(f"Loaded artifact {artifact_path}")
    return artifact


class ContractFactory:
    """
    Deploys new instances of one compiled contract from a local signer
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        account: LocalAccount,
        contract_name: str,
        abi: List[Dict],
        bytecode: str,
        chain_id: Optional[int] = None,
        gas_settings: Optional[Dict] = None,
        receipt_timeout: Optional[float] = None
    ):
        """
        Initialize Contract Factory

        Args:
            w3: AsyncWeb3 instance
            account: Signer paying for the deployment
            contract_name: Name used in log and error messages
            abi: Contract ABI
            bytecode: Creation bytecode
            chain_id: Chain id to sign for (None = ask the node)
            gas_settings: GasCalculator overrides
            receipt_timeout: Seconds to wait for confirmation (None = no limit)
        """
        self.w3 = w3
        self.account = account
        self.contract_name = contract_name
        self.abi = abi
        self.bytecode = bytecode
        self.chain_id = chain_id
        self.receipt_timeout = receipt_timeout

        self.gas_calculator = GasCalculator(w3, gas_settings)

    async def deploy(self, *constructor_args):
        """
        Deploy one contract instance and wait for confirmation

        Submits a single transaction; nothing is retried.

        Returns:
            Contract instance bound to the new address

        Raises:
            DeploymentFailedError: transaction reverted
        """
        sender = self.account.address
        constructor = self.w3.eth.contract(abi=self.abi, bytecode=self.bytecode).constructor(*constructor_args)

        logger.info(f"Deploying {self.contract_name} from {sender}")

        nonce = await self.w3.eth.get_transaction_count(sender, 'pending')
        chain_id = self.chain_id if self.chain_id is not None else await self.w3.eth.chain_id

        try:
            gas_estimate = await constructor.estimate_gas({'from': sender})
            gas_limit = self.gas_calculator.apply_buffer(gas_estimate)
        except (Web3Exception, ValueError) as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            gas_limit = self.gas_calculator.default_gas_limit

        logger.info(f"Gas limit: {gas_limit}")

        transaction = await constructor.build_transaction({
            'from': sender,
            'nonce': nonce,
            'gas': gas_limit,
            'chainId': chain_id,
            **(await self.gas_calculator.get_fee_params())
        })

        signed_tx = self.account.sign_transaction(transaction)
        tx_hash = await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        tx_hash_hex = AsyncWeb3.to_hex(tx_hash)

        logger.info(f"Transaction sent: {tx_hash_hex}")
        logger.info("Waiting for confirmation...")

        receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)

        if receipt['status'] != 1:
            raise DeploymentFailedError(self.contract_name, tx_hash_hex)

        contract_address = receipt['contractAddress']
        logger.success(f"{self.contract_name} deployed at {contract_address} (gas used: {receipt['gasUsed']})")

        return self.attach(contract_address)

    def attach(self, address: str):
        """Bind this factory's ABI to an already deployed address"""
        return self.w3.eth.contract(address=AsyncWeb3.to_checksum_address(address), abi=self.abi)
