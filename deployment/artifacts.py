import os
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from .errors import DeployError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract template"""
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str


class ArtifactStore:
    """Loads compiled contract artifacts from a Truffle or Hardhat build directory"""

    def __init__(self, directory: str):
        self.directory = directory
        self._cache: Dict[str, ContractArtifact] = {}

    def path_for(self, name: str) -> str:
        return os.path.join(self.directory, f"{name}.json")

    def load(self, name: str) -> ContractArtifact:
        """
        Load the artifact of a contract

        Args:
            name: Contract name, also the artifact file stem

        Returns:
            ContractArtifact with the ABI and creation bytecode

        Raises:
            DeployError: If the artifact is missing or has no bytecode
        """
        if name in self._cache:
            return self._cache[name]

        artifact_path = self.path_for(name)
        try:
            with open(artifact_path, 'r') as f:
                data = json.load(f)
            abi = data['abi']
            bytecode = data['bytecode']
        except (OSError, ValueError, KeyError) as e:
            raise DeployError(name, f"could not read artifact {artifact_path}: {e}") from e

        if not bytecode or bytecode == "0x":
            raise DeployError(name, f"artifact {artifact_path} has no bytecode")

        artifact = ContractArtifact(name=name, abi=abi, bytecode=bytecode)
        self._cache[name] = artifact
        logger.debug(f"Loaded artifact for {name} from {artifact_path}")
        return artifact
