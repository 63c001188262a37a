"""
Web3 provider wrapper

Submits transactions, waits for their confirmation and reads the addresses of
created contracts. Every failure coming out of web3 is re-raised as
ProviderError so callers deal with a single error type.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from .artifacts import ContractArtifact
from .errors import ProviderError

logger = logging.getLogger(__name__)


class Web3Provider:
    def __init__(self, w3: Web3, private_key: Optional[str] = None,
                 confirmation_timeout: int = 120):
        self.w3 = w3
        self.private_key = private_key
        self.confirmation_timeout = confirmation_timeout
        self.local_account: Optional[Any] = None

        if private_key:
            try:
                self.local_account = self.w3.eth.account.from_key(private_key)
            except Exception as e:
                raise ProviderError(f"Invalid private key: {e}") from e

    @classmethod
    def connect(cls, rpc_url: str, poa: bool = False, private_key: Optional[str] = None,
                confirmation_timeout: int = 120) -> "Web3Provider":
        """
        Connect to a JSON-RPC endpoint

        Args:
            rpc_url: HTTP endpoint of the node
            poa: Inject the proof-of-authority extra-data middleware
            private_key: Key used to sign transactions locally
            confirmation_timeout: Seconds to wait for each receipt

        Returns:
            Connected Web3Provider

        Raises:
            ProviderError: If the node cannot be reached
        """
        w3 = Web3(Web3.HTTPProvider(rpc_url))
        if poa:
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        if not w3.is_connected():
            raise ProviderError(f"Could not connect to RPC URL: {rpc_url}")

        logger.info(f"Connected to blockchain at {rpc_url}")
        return cls(w3, private_key=private_key, confirmation_timeout=confirmation_timeout)

    def accounts(self) -> List[str]:
        """Accounts available for signing, the local key first if configured"""
        if self.local_account is not None:
            return [self.local_account.address]
        try:
            return list(self.w3.eth.accounts)
        except Exception as e:
            raise ProviderError(f"Could not list node accounts: {e}") from e

    def _base_transaction(self, sender: str) -> Dict[str, Any]:
        return {
            'from': sender,
            'nonce': self.w3.eth.get_transaction_count(sender),
            'gasPrice': self.w3.eth.gas_price,
        }

    def build_deploy_transaction(self, artifact: ContractArtifact, args: Sequence[Any],
                                 sender: str) -> Dict[str, Any]:
        """Build an unsigned contract-creation transaction"""
        try:
            contract = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
            return contract.constructor(*args).build_transaction(self._base_transaction(sender))
        except Exception as e:
            raise ProviderError(f"Could not build deployment of {artifact.name}: {e}") from e

    def submit_transaction(self, tx: Dict[str, Any]) -> Any:
        """Sign (locally or on the node) and send a transaction, returning its hash"""
        try:
            if self.local_account is not None:
                signed_tx = self.w3.eth.account.sign_transaction(tx, self.private_key)
                tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
            else:
                tx_hash = self.w3.eth.send_transaction(tx)
        except Exception as e:
            raise ProviderError(f"Transaction rejected: {e}") from e

        logger.info(f"Transaction sent: {Web3.to_hex(tx_hash)}")
        return tx_hash

    def send_raw_transaction(self, raw_tx: str) -> Any:
        """Send an already signed transaction"""
        try:
            tx_hash = self.w3.eth.send_raw_transaction(raw_tx)
        except Exception as e:
            raise ProviderError(f"Raw transaction rejected: {e}") from e

        logger.info(f"Raw transaction sent: {Web3.to_hex(tx_hash)}")
        return tx_hash

    def wait_for_confirmation(self, tx_hash: Any) -> Any:
        """
        Block until a transaction is mined

        Raises:
            ProviderError: On timeout or when the transaction reverted
        """
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.confirmation_timeout
            )
        except Exception as e:
            raise ProviderError(f"Transaction {Web3.to_hex(tx_hash)} was not confirmed: {e}") from e

        if receipt['status'] != 1:
            raise ProviderError(f"Transaction {Web3.to_hex(tx_hash)} failed in block {receipt['blockNumber']}")

        logger.info(f"Transaction confirmed in block {receipt['blockNumber']}")
        return receipt

    def deployed_address(self, receipt: Any) -> str:
        """Checksum address of the contract created by a receipt"""
        address = receipt.get('contractAddress')
        if not address:
            raise ProviderError("Receipt does not carry a contract address")
        return Web3.to_checksum_address(address)

    def has_code(self, address: str) -> bool:
        try:
            code = self.w3.eth.get_code(Web3.to_checksum_address(address))
        except Exception as e:
            raise ProviderError(f"Could not read code at {address}: {e}") from e
        return len(code) > 0

    def transfer(self, sender: str, to: str, value_wei: int) -> Any:
        """Send ether and wait for the transfer to confirm"""
        try:
            tx = self._base_transaction(sender)
            tx.update({
                'to': Web3.to_checksum_address(to),
                'value': value_wei,
                'gas': 21000,
                'chainId': self.w3.eth.chain_id,
            })
        except Exception as e:
            raise ProviderError(f"Could not build transfer to {to}: {e}") from e
        return self.wait_for_confirmation(self.submit_transaction(tx))
