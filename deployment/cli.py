#!/usr/bin/env python3
"""
Command line entry point for the Smartys deployment
"""

import argparse
import logging
from typing import List, Optional

from .artifacts import ArtifactStore
from .config import DeploymentConfig
from .errors import DeploymentError
from .networks import get_profile
from .orchestrator import Orchestrator
from .provider import Web3Provider
from .record import write_deployment_record
from .registry import RegistryBootstrapper

logger = logging.getLogger(__name__)


def configure_logging(log_file: str):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


def _exit_code(failed: bool, config: DeploymentConfig) -> int:
    if failed and not config.legacy_silent_exit:
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Run the deployment and return the process exit code"""
    parser = argparse.ArgumentParser(description="Deploy the Smartys contracts")
    parser.add_argument("network", nargs="?", help="Target network (defaults to $NETWORK)")
    args = parser.parse_args(argv)

    try:
        config = DeploymentConfig.from_env()
    except DeploymentError as e:
        configure_logging("deployment.log")
        logger.error(f"Invalid configuration: {e}")
        return 1

    configure_logging(config.log_file)
    network = args.network or config.network
    profile = get_profile(network)

    try:
        provider = Web3Provider.connect(
            config.rpc_url,
            poa=profile.poa,
            private_key=config.private_key,
            confirmation_timeout=config.confirmation_timeout,
        )
        accounts = provider.accounts()
    except DeploymentError as e:
        logger.error(f"Could not reach {network}: {e!r}")
        return _exit_code(True, config)

    orchestrator = Orchestrator(
        provider,
        ArtifactStore(config.artifacts_dir),
        known_token_addresses=config.known_token_addresses,
        registry_bootstrapper=RegistryBootstrapper(
            provider, config.registry_deploy_tx_path, config.node_modules_dir
        ),
    )
    result = orchestrator.run(network, accounts)

    record_written = True
    try:
        write_deployment_record(result, accounts[0] if accounts else None, config.record_path)
    except OSError as e:
        logger.error(f"Could not write deployment record to {config.record_path}: {e!r}")
        record_written = False

    if result.succeeded:
        logger.info(f"Deployment to {network} completed: {result.addresses}")
    else:
        logger.warning(f"Deployment to {network} did not complete")
    return _exit_code(not (result.succeeded and record_written), config)


if __name__ == "__main__":
    raise SystemExit(main())
