"""
Deployment error types
"""


class DeploymentError(Exception):
    """Base class for every failure raised by the deployment tooling"""


class ProviderError(DeploymentError):
    """A transaction was rejected by the node or never confirmed"""


class DeployError(DeploymentError):
    """A contract-creation transaction could not be completed"""

    def __init__(self, contract_name: str, message: str):
        super().__init__(f"{contract_name}: {message}")
        self.contract_name = contract_name


class ConfigurationError(DeploymentError):
    """Configuration is missing or malformed"""
