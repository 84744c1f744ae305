"""
Blockchain Interaction Package
Handles network setup, contract deployment, and DealClient calls
"""

from .network import Network
from .contract_factory import ContractFactory, load_artifact
from .deal_client import DealClient, DealRequest, DealStatus, ExtraParamsV1
from .exceptions import (
    DeploymentError,
    ConfigurationError,
    ArtifactNotFoundError,
    DeploymentFailedError
)

__all__ = [
    'Network',
    'ContractFactory',
    'load_artifact',
    'DealClient',
    'DealRequest',
    'DealStatus',
    'ExtraParamsV1',
    'DeploymentError',
    'ConfigurationError',
    'ArtifactNotFoundError',
    'DeploymentFailedError'
]
