"""
Deployment orchestrator

Runs the Smartys migration against one network:

1. classify the network and decide whether the ERC-1820 registry is needed
2. bootstrap the registry (failures are logged, the run goes on)
3. resolve the token: reuse the known address or deploy SmartysToken
4. deploy TransportContract(token)
5. deploy OrderContract(token)

A failure in steps 3-5 ends the run. Contracts deployed before the failure
stay on chain and are reported in the result.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from .artifacts import ArtifactStore
from .deployer import ContractDeployer, ContractDescriptor, DeployedContract
from .errors import ConfigurationError
from .networks import NETWORK_PROFILES, NetworkPolicy, NetworkProfile, get_profile
from .provider import Web3Provider
from .registry import RegistryBootstrapper

logger = logging.getLogger(__name__)

TOKEN_CONTRACT = "SmartysToken"
TRANSPORT_CONTRACT = "TransportContract"
ORDER_CONTRACT = "OrderContract"


@dataclass
class DeploymentResult:
    """Outcome of a deployment run"""
    network: str
    policy: NetworkPolicy
    contracts: List[DeployedContract] = field(default_factory=list)
    token_address: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def addresses(self) -> Dict[str, str]:
        """Contract name -> address, the reused token included"""
        addresses = {}
        if self.token_address:
            addresses[TOKEN_CONTRACT] = self.token_address
        for contract in self.contracts:
            addresses[contract.name] = contract.address
        return addresses


class Orchestrator:
    def __init__(self, provider: Web3Provider, artifacts: ArtifactStore,
                 known_token_addresses: Optional[Mapping[str, str]] = None,
                 registry_bootstrapper: Optional[RegistryBootstrapper] = None,
                 profiles: Mapping[str, NetworkProfile] = NETWORK_PROFILES):
        self.provider = provider
        self.artifacts = artifacts
        self.known_token_addresses = dict(known_token_addresses or {})
        self.registry_bootstrapper = registry_bootstrapper
        self.profiles = profiles

    def _bootstrap_registry(self, account: str):
        if self.registry_bootstrapper is None:
            logger.warning("No registry bootstrapper configured, skipping ERC-1820 registry check")
            return
        try:
            self.registry_bootstrapper.ensure_registry(account)
        except Exception as e:
            logger.error(f"ERC-1820 registry bootstrap failed, continuing: {e!r}")

    def _deploy(self, deployer: ContractDeployer, result: DeploymentResult,
                descriptor: ContractDescriptor) -> DeployedContract:
        contract = deployer.deploy(descriptor)
        result.contracts.append(contract)
        logger.info(f"Deployed {contract.name} contract to {contract.address}")
        return contract

    def _resolve_token(self, profile: NetworkProfile, deployer: ContractDeployer,
                       result: DeploymentResult) -> str:
        if profile.policy is NetworkPolicy.REUSE_KNOWN_TOKEN:
            token_address = self.known_token_addresses.get(profile.name)
            if not token_address:
                raise ConfigurationError(f"No known {TOKEN_CONTRACT} address configured for {profile.name}")
            logger.info(f"Reusing known {TOKEN_CONTRACT} at {token_address}")
            return token_address

        token = self._deploy(deployer, result, ContractDescriptor(TOKEN_CONTRACT))
        return token.address

    def run(self, network_name: str, accounts: Sequence[str]) -> DeploymentResult:
        """
        Deploy the Smartys contracts to a network

        Args:
            network_name: Target network identifier
            accounts: Available accounts; the first one deploys and pays

        Returns:
            DeploymentResult with every contract deployed before the run
            ended and the error that ended it, if any
        """
        profile = get_profile(network_name, self.profiles)
        result = DeploymentResult(network=network_name, policy=profile.policy)

        if profile.policy is NetworkPolicy.REUSE_KNOWN_TOKEN:
            logger.info(f"Doing update deploy on {network_name}")
        else:
            logger.info(f"Doing fresh deploy on {network_name}")

        try:
            if not accounts:
                raise ConfigurationError("No deployer account available")
            deployer_account = accounts[0]

            if profile.bootstrap_registry:
                self._bootstrap_registry(deployer_account)

            deployer = ContractDeployer(self.provider, self.artifacts, deployer_account)
            token_address = self._resolve_token(profile, deployer, result)
            result.token_address = token_address

            self._deploy(deployer, result, ContractDescriptor(TRANSPORT_CONTRACT, (token_address,)))
            self._deploy(deployer, result, ContractDescriptor(ORDER_CONTRACT, (token_address,)))
        except Exception as e:
            logger.error(f"Deployment failed: {e!r}")
            result.error = e

        return result
