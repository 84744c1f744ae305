"""
DealClient Contract
Storage deal proposals and piece status queries against a deployed DealClient
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple
from web3 import AsyncWeb3
from eth_account.signers.local import LocalAccount
from loguru import logger

from .exceptions import ConfigurationError


class DealStatus(IntEnum):
    """Lifecycle of a piece as tracked by the contract"""
    NONE = 0
    REQUEST_SUBMITTED = 1
    DEAL_PUBLISHED = 2
    DEAL_ACTIVATED = 3
    DEAL_TERMINATED = 4


@dataclass
class ExtraParamsV1:
    location_ref: str
    car_size: int
    skip_ipni_announce: bool = False
    remove_unsealed_copy: bool = False

    def as_tuple(self) -> Tuple:
        return (self.location_ref, self.car_size, self.skip_ipni_announce, self.remove_unsealed_copy)


@dataclass
class DealRequest:
    """
    Deal proposal as encoded for makeDealProposal

    piece_cid is the binary CID; label carries the payload CID string.
    """
    piece_cid: bytes
    piece_size: int
    verified_deal: bool
    label: str
    start_epoch: int
    end_epoch: int
    extra_params: ExtraParamsV1
    storage_price_per_epoch: int = 0
    provider_collateral: int = 0
    client_collateral: int = 0
    extra_params_version: int = 1

    def as_tuple(self) -> Tuple:
        return (
            self.piece_cid,
            self.piece_size,
            self.verified_deal,
            self.label,
            self.start_epoch,
            self.end_epoch,
            self.storage_price_per_epoch,
            self.provider_collateral,
            self.client_collateral,
            self.extra_params_version,
            self.extra_params.as_tuple()
        )


class DealClient:
    """
    Wrapper around a deployed DealClient contract
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        address: str,
        account: Optional[LocalAccount] = None,
        abi: Optional[List[Dict]] = None,
        chain_id: Optional[int] = None
    ):
        """
        Initialize DealClient

        Args:
            w3: AsyncWeb3 instance
            address: Deployed contract address
            account: Signer for state-changing calls (not needed for reads)
            abi: Full ABI from artifacts (default: minimal built-in ABI)
            chain_id: Chain id to sign for (None = let web3 fill it)
        """
        self.w3 = w3
        self.account = account
        self.chain_id = chain_id

        self.contract = w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(address),
            abi=abi or self._get_minimal_abi()
        )

    async def make_deal_proposal(self, deal_request: DealRequest) -> bytes:
        """
        Submit a deal proposal

        Returns:
            Transaction hash
        """
        if self.account is None:
            raise ConfigurationError("A private key is required to propose deals")

        sender = self.account.address
        tx_params = {
            'from': sender,
            'nonce': await self.w3.eth.get_transaction_count(sender, 'pending')
        }
        if self.chain_id is not None:
            tx_params['chainId'] = self.chain_id

        tx = await self.contract.functions.makeDealProposal(deal_request.as_tuple()).build_transaction(tx_params)

        signed_tx = self.account.sign_transaction(tx)
        tx_hash = await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)

        logger.info(f"Deal proposal sent: {AsyncWeb3.to_hex(tx_hash)}")
        return tx_hash

    async def piece_status(self, piece_cid: bytes) -> DealStatus:
        """Get the contract's status for a piece"""
        status = await self.contract.functions.pieceStatus(piece_cid).call()
        return DealStatus(status)

    def _get_minimal_abi(self) -> List[Dict]:
        """
        Minimal ABI covering makeDealProposal and pieceStatus
        Used when compiled artifacts are not available
        """
        extra_params = {
            "components": [
                {"name": "location_ref", "type": "string"},
                {"name": "car_size", "type": "uint64"},
                {"name": "skip_ipni_announce", "type": "bool"},
                {"name": "remove_unsealed_copy", "type": "bool"}
            ],
            "name": "extra_params",
            "type": "tuple"
        }

        return [
            {
                "inputs": [{
                    "components": [
                        {"name": "piece_cid", "type": "bytes"},
                        {"name": "piece_size", "type": "uint64"},
                        {"name": "verified_deal", "type": "bool"},
                        {"name": "label", "type": "string"},
                        {"name": "start_epoch", "type": "int64"},
                        {"name": "end_epoch", "type": "int64"},
                        {"name": "storage_price_per_epoch", "type": "uint256"},
                        {"name": "provider_collateral", "type": "uint256"},
                        {"name": "client_collateral", "type": "uint256"},
                        {"name": "extra_params_version", "type": "uint64"},
                        extra_params
                    ],
                    "name": "deal",
                    "type": "tuple"
                }],
                "name": "makeDealProposal",
                "outputs": [{"name": "", "type": "bytes32"}],
                "stateMutability": "nonpayable",
                "type": "function"
            },
            {
                "inputs": [{"name": "", "type": "bytes"}],
                "name": "pieceStatus",
                "outputs": [{"name": "", "type": "uint8"}],
                "stateMutability": "view",
                "type": "function"
            }
        ]
