"""
Deployment Exceptions
Errors raised while resolving, deploying, or talking to contracts
"""

from typing import Optional


class DeploymentError(Exception):
    """Base error: the deployment failed"""


class ConfigurationError(DeploymentError):
    """Network or signer settings are missing or invalid"""


class ArtifactNotFoundError(DeploymentError):
    """No deployable compiled artifact exists for the requested contract"""

    def __init__(self, contract_name: str, artifacts_dir: str, reason: Optional[str] = None):
        self.contract_name = contract_name
        self.artifacts_dir = artifacts_dir

        message = f"Artifact for {contract_name} not found in {artifacts_dir}"
        if reason:
            message = f"{message}: {reason}"

        super().__init__(message)


class DeploymentFailedError(DeploymentError):
    """Deployment transaction was mined but reverted"""

    def __init__(self, contract_name: str, tx_hash: str):
        self.contract_name = contract_name
        self.tx_hash = tx_hash
        super().__init__(f"Deployment of {contract_name} reverted (tx {tx_hash})")
