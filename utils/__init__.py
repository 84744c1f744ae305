"""
Utilities Package
Gas selection and logging setup
"""

from .gas_calculator import GasCalculator
from .logging_config import setup_logging

__all__ = [
    'GasCalculator',
    'setup_logging'
]
