"""
Smartys Contract Deployment
===========================

Deploys the Smartys contracts to a target network:
- SmartysToken: ERC-777 token, deployed fresh or reused from a known address
- TransportContract: transport bookkeeping, takes the token address
- OrderContract: order bookkeeping, takes the token address

Run with ``python -m deployment <network>``.
"""

__version__ = "1.0.0"
__author__ = "Smartys Team"
