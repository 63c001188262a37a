import os
import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .orchestrator import DeploymentResult

logger = logging.getLogger(__name__)


def write_deployment_record(result: DeploymentResult, deployer: Optional[str], path: str) -> Dict[str, Any]:
    """Write the addresses of a run to a JSON file and return what was written"""
    record = {
        'network': result.network,
        'policy': result.policy.value,
        'succeeded': result.succeeded,
        'contracts': result.addresses,
        'roles': {'deployer': deployer},
        'error': repr(result.error) if result.error is not None else None,
        'timestamp': datetime.now().isoformat(),
    }

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(record, f, indent=2)

    logger.info(f"Deployment record written to {path}")
    return record


def load_deployment_record(path: str) -> Dict[str, Any]:
    """Read a record written by write_deployment_record"""
    with open(path, 'r') as f:
        return json.load(f)
