"""
Network classification

Maps a network name to the deployment policy used on it. The table below is
the only place networks are described; add an entry to support a new one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping


class NetworkPolicy(Enum):
    """How the token contract is obtained on a network"""
    DEPLOY_FRESH_TOKEN = "deploy-fresh-token"
    REUSE_KNOWN_TOKEN = "reuse-known-token"


@dataclass(frozen=True)
class NetworkProfile:
    """Deployment settings for a single network"""
    name: str
    policy: NetworkPolicy = NetworkPolicy.DEPLOY_FRESH_TOKEN
    bootstrap_registry: bool = False
    poa: bool = False


DEVELOPMENT_NETWORK = "development"
UPDATE_NETWORK = "rinkeby-update"

NETWORK_PROFILES: Dict[str, NetworkProfile] = {
    DEVELOPMENT_NETWORK: NetworkProfile(
        name=DEVELOPMENT_NETWORK,
        policy=NetworkPolicy.DEPLOY_FRESH_TOKEN,
        bootstrap_registry=True,
    ),
    "rinkeby": NetworkProfile(
        name="rinkeby",
        policy=NetworkPolicy.DEPLOY_FRESH_TOKEN,
        poa=True,
    ),
    UPDATE_NETWORK: NetworkProfile(
        name=UPDATE_NETWORK,
        policy=NetworkPolicy.REUSE_KNOWN_TOKEN,
        poa=True,
    ),
}


def get_profile(network_name: str,
                profiles: Mapping[str, NetworkProfile] = NETWORK_PROFILES) -> NetworkProfile:
    """
    Look up the profile of a network

    Args:
        network_name: Network identifier, matched exactly
        profiles: Policy table to look the name up in

    Returns:
        The matching profile, or a fresh-deploy profile without registry
        bootstrap for names the table does not know
    """
    profile = profiles.get(network_name)
    if profile is None:
        return NetworkProfile(name=network_name)
    return profile


def classify(network_name: str,
             profiles: Mapping[str, NetworkProfile] = NETWORK_PROFILES) -> NetworkPolicy:
    """Return the token policy for a network"""
    return get_profile(network_name, profiles).policy


def needs_registry_bootstrap(network_name: str,
                             profiles: Mapping[str, NetworkProfile] = NETWORK_PROFILES) -> bool:
    """Whether the ERC-1820 registry must be ensured before deploying"""
    return get_profile(network_name, profiles).bootstrap_registry
