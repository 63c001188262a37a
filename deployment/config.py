"""
Deployment configuration loaded from the environment and an optional .env file
"""

import os
import json
from dataclasses import dataclass, field
from typing import Dict, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError
from .networks import DEVELOPMENT_NETWORK, UPDATE_NETWORK

# Token contracts already live on these networks
DEFAULT_KNOWN_TOKEN_ADDRESSES: Dict[str, str] = {
    UPDATE_NETWORK: "0xe0D15a857B78E4472876476Bef9DA392EC5Bce23",
}

TRUE_VALUES = ("1", "true", "yes", "on")


def _parse_token_addresses(raw: Optional[str]) -> Dict[str, str]:
    """Merge the KNOWN_TOKEN_ADDRESSES JSON object over the built-in mapping"""
    addresses = dict(DEFAULT_KNOWN_TOKEN_ADDRESSES)
    if not raw:
        return addresses

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"KNOWN_TOKEN_ADDRESSES is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ConfigurationError("KNOWN_TOKEN_ADDRESSES must be a JSON object of network -> address")

    for network, address in parsed.items():
        if not isinstance(address, str) or not address:
            raise ConfigurationError(f"Known token address for {network!r} must be a non-empty string")
        addresses[network] = address
    return addresses


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


@dataclass
class DeploymentConfig:
    """Settings for a deployment run"""
    network: str = DEVELOPMENT_NETWORK
    rpc_url: str = "http://127.0.0.1:8545"
    private_key: Optional[str] = None
    artifacts_dir: str = os.path.join("build", "contracts")
    known_token_addresses: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_KNOWN_TOKEN_ADDRESSES)
    )
    registry_deploy_tx_path: Optional[str] = None
    node_modules_dir: str = "node_modules"
    confirmation_timeout: int = 120
    record_path: str = "deployment.json"
    legacy_silent_exit: bool = False
    log_file: str = "deployment.log"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "DeploymentConfig":
        """
        Build the configuration from environment variables

        Args:
            dotenv_path: Optional .env file; the default lookup is used when omitted

        Returns:
            DeploymentConfig populated from the environment

        Raises:
            ConfigurationError: If a variable holds a malformed value
        """
        load_dotenv(dotenv_path)

        return cls(
            network=os.getenv("NETWORK", DEVELOPMENT_NETWORK),
            rpc_url=os.getenv("RPC_URL", "http://127.0.0.1:8545"),
            private_key=os.getenv("PRIVATE_KEY") or None,
            artifacts_dir=os.getenv("ARTIFACTS_DIR", os.path.join("build", "contracts")),
            known_token_addresses=_parse_token_addresses(os.getenv("KNOWN_TOKEN_ADDRESSES")),
            registry_deploy_tx_path=os.getenv("REGISTRY_DEPLOY_TX_PATH") or None,
            node_modules_dir=os.getenv("NODE_MODULES_DIR", "node_modules"),
            confirmation_timeout=_parse_int(
                "CONFIRMATION_TIMEOUT", os.getenv("CONFIRMATION_TIMEOUT", "120")
            ),
            record_path=os.getenv("DEPLOYMENT_RECORD_PATH", "deployment.json"),
            legacy_silent_exit=os.getenv("LEGACY_SILENT_EXIT", "false").lower() in TRUE_VALUES,
            log_file=os.getenv("LOG_FILE", "deployment.log"),
        )

    def known_token_address(self, network: str) -> Optional[str]:
        """Previously deployed token address on a network, if any"""
        return self.known_token_addresses.get(network)
