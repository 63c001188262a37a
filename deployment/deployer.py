"""
Contract deployer

Deploys one contract per call and remembers what it deployed, so asking for
the same descriptor twice in a run returns the first deployment.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from web3 import Web3

from .artifacts import ArtifactStore
from .errors import DeployError, ProviderError
from .provider import Web3Provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractDescriptor:
    """Contract template name and its ordered constructor arguments"""
    name: str
    constructor_args: Tuple[Any, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'constructor_args', tuple(self.constructor_args))


@dataclass(frozen=True)
class DeployedContract:
    """A contract confirmed on chain"""
    name: str
    address: str
    tx_hash: Optional[str] = None


class ContractDeployer:
    def __init__(self, provider: Web3Provider, artifacts: ArtifactStore, sender: str):
        self.provider = provider
        self.artifacts = artifacts
        self.sender = sender
        self._deployed: Dict[ContractDescriptor, DeployedContract] = {}

    @property
    def deployed(self) -> List[DeployedContract]:
        """Contracts deployed by this deployer, in deployment order"""
        return list(self._deployed.values())

    def deploy(self, descriptor: ContractDescriptor) -> DeployedContract:
        """
        Deploy a contract and wait for it to be confirmed

        A single submission is made; failures are not retried.

        Args:
            descriptor: Template name and constructor arguments

        Returns:
            DeployedContract holding the on-chain address

        Raises:
            DeployError: If the artifact cannot be loaded or the transaction
                is rejected or not confirmed
        """
        if descriptor in self._deployed:
            logger.info(f"{descriptor.name} already deployed in this run, reusing it")
            return self._deployed[descriptor]

        artifact = self.artifacts.load(descriptor.name)
        logger.info(f"Deploying {descriptor.name} with args {list(descriptor.constructor_args)}")

        try:
            tx = self.provider.build_deploy_transaction(artifact, descriptor.constructor_args, self.sender)
            tx_hash = self.provider.submit_transaction(tx)
            receipt = self.provider.wait_for_confirmation(tx_hash)
            address = self.provider.deployed_address(receipt)
        except ProviderError as e:
            raise DeployError(descriptor.name, str(e)) from e

        contract = DeployedContract(name=descriptor.name, address=address, tx_hash=Web3.to_hex(tx_hash))
        self._deployed[descriptor] = contract
        return contract
