"""
Gas Calculator
Fee and gas limit selection for contract deployment transactions
"""

from typing import Dict, Optional
from web3 import AsyncWeb3
from web3.exceptions import Web3Exception
from loguru import logger


DEFAULT_GAS_SETTINGS = {
    'gas_limit_buffer': 1.2,
    'default_gas_limit': 3000000,
    'max_gas_price_gwei': 500,
    'priority_fee_gwei': 2
}


class GasCalculator:
    """
    Picks EIP-1559 fee params when the chain reports a base fee,
    legacy gasPrice otherwise
    """

    def __init__(self, w3: AsyncWeb3, gas_settings: Optional[Dict] = None):
        """
        Initialize Gas Calculator

        Args:
            w3: AsyncWeb3 instance
            gas_settings: Overrides for DEFAULT_GAS_SETTINGS
        """
        self.w3 = w3

        settings = dict(DEFAULT_GAS_SETTINGS)
        settings.update(gas_settings or {})

        self.gas_limit_buffer = settings['gas_limit_buffer']
        self.default_gas_limit = settings['default_gas_limit']
        self.max_gas_price_gwei = settings['max_gas_price_gwei']
        self.priority_fee_gwei = settings['priority_fee_gwei']

    def apply_buffer(self, gas_estimate: int) -> int:
        """Add the configured safety margin to a gas estimate"""
        return int(gas_estimate * self.gas_limit_buffer)

    async def get_fee_params(self) -> Dict[str, int]:
        """
        Get fee fields for a transaction

        Returns:
            {'maxFeePerGas', 'maxPriorityFeePerGas'} on EIP-1559 chains,
            {'gasPrice'} otherwise. All values in wei.
        """
        max_allowed_wei = AsyncWeb3.to_wei(self.max_gas_price_gwei, 'gwei')

        latest_block = await self.w3.eth.get_block('latest')
        base_fee_wei = latest_block.get('baseFeePerGas')

        if base_fee_wei is None:
            gas_price_wei = await self.w3.eth.gas_price
            gas_price_wei = min(gas_price_wei, max_allowed_wei)
            logger.debug(f"Legacy gas price: {AsyncWeb3.from_wei(gas_price_wei, 'gwei')} gwei")
            return {'gasPrice': int(gas_price_wei)}

        try:
            priority_fee_wei = await self.w3.eth.max_priority_fee
        except (Web3Exception, ValueError) as e:
            # Some nodes don't implement eth_maxPriorityFeePerGas
            logger.warning(f"Priority fee lookup failed: {e}, using configured value")
            priority_fee_wei = AsyncWeb3.to_wei(self.priority_fee_gwei, 'gwei')

        # Max fee = base fee * 2 + priority fee (buffer for fluctuations)
        max_fee_wei = min((base_fee_wei * 2) + priority_fee_wei, max_allowed_wei)
        priority_fee_wei = min(priority_fee_wei, max_fee_wei)

        logger.debug(
            f"EIP-1559 fees: max {AsyncWeb3.from_wei(max_fee_wei, 'gwei')} gwei, "
            f"priority {AsyncWeb3.from_wei(priority_fee_wei, 'gwei')} gwei"
        )

        return {
            'maxFeePerGas': int(max_fee_wei),
            'maxPriorityFeePerGas': int(priority_fee_wei)
        }
