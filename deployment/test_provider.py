#!/usr/bin/env python3
"""
Tests for the web3 provider wrapper
"""

import pytest
from unittest.mock import patch, MagicMock
from deployment.artifacts import ContractArtifact
from deployment.errors import ProviderError
from deployment.provider import Web3Provider

TX_HASH = bytes.fromhex("ab" * 32)
SENDER = "0x90F8bf6A479f320ead074411a4B0e7944Ea8c9C1"


class TestWeb3Provider:
    """Test class for Web3Provider with a mocked node"""

    def setup_method(self):
        self.w3 = MagicMock()
        self.w3.eth.get_transaction_count.return_value = 7
        self.w3.eth.gas_price = 20_000_000_000
        self.provider = Web3Provider(self.w3, confirmation_timeout=30)

    def test_node_accounts_without_private_key(self):
        self.w3.eth.accounts = [SENDER]
        assert self.provider.accounts() == [SENDER]

    def test_local_account_with_private_key(self):
        self.w3.eth.account.from_key.return_value = MagicMock(address=SENDER)
        provider = Web3Provider(self.w3, private_key="0x" + "22" * 32)
        assert provider.accounts() == [SENDER]

    def test_invalid_private_key(self):
        self.w3.eth.account.from_key.side_effect = ValueError("bad key")
        with pytest.raises(ProviderError, match="Invalid private key"):
            Web3Provider(self.w3, private_key="nope")

    def test_build_deploy_transaction(self):
        artifact = ContractArtifact(name="TransportContract", abi=[], bytecode="0x6080")
        contract = self.w3.eth.contract.return_value
        contract.constructor.return_value.build_transaction.return_value = {'data': '0x6080'}

        tx = self.provider.build_deploy_transaction(artifact, ("0xToken",), SENDER)

        assert tx == {'data': '0x6080'}
        self.w3.eth.contract.assert_called_once_with(abi=[], bytecode="0x6080")
        contract.constructor.assert_called_once_with("0xToken")
        contract.constructor.return_value.build_transaction.assert_called_once_with({
            'from': SENDER,
            'nonce': 7,
            'gasPrice': 20_000_000_000,
        })

    def test_build_deploy_transaction_failure(self):
        artifact = ContractArtifact(name="OrderContract", abi=[], bytecode="0x6080")
        self.w3.eth.contract.return_value.constructor.side_effect = TypeError("wrong argument count")

        with pytest.raises(ProviderError, match="OrderContract"):
            self.provider.build_deploy_transaction(artifact, (), SENDER)

    def test_submit_transaction_on_node(self):
        self.w3.eth.send_transaction.return_value = TX_HASH

        assert self.provider.submit_transaction({'from': SENDER}) == TX_HASH
        self.w3.eth.send_transaction.assert_called_once_with({'from': SENDER})
        self.w3.eth.send_raw_transaction.assert_not_called()

    def test_submit_transaction_signed_locally(self):
        key = "0x" + "22" * 32
        signed = MagicMock(raw_transaction=b"raw")
        self.w3.eth.account.sign_transaction.return_value = signed
        self.w3.eth.send_raw_transaction.return_value = TX_HASH
        provider = Web3Provider(self.w3, private_key=key)

        assert provider.submit_transaction({'from': SENDER}) == TX_HASH
        self.w3.eth.account.sign_transaction.assert_called_once_with({'from': SENDER}, key)
        self.w3.eth.send_raw_transaction.assert_called_once_with(b"raw")
        self.w3.eth.send_transaction.assert_not_called()

    def test_submit_transaction_rejected(self):
        self.w3.eth.send_transaction.side_effect = ValueError("insufficient funds")
        with pytest.raises(ProviderError, match="insufficient funds"):
            self.provider.submit_transaction({'from': SENDER})

    def test_wait_for_confirmation(self):
        receipt = {'status': 1, 'blockNumber': 12}
        self.w3.eth.wait_for_transaction_receipt.return_value = receipt

        assert self.provider.wait_for_confirmation(TX_HASH) == receipt
        self.w3.eth.wait_for_transaction_receipt.assert_called_once_with(TX_HASH, timeout=30)

    def test_wait_for_confirmation_reverted(self):
        self.w3.eth.wait_for_transaction_receipt.return_value = {'status': 0, 'blockNumber': 12}
        with pytest.raises(ProviderError, match="failed in block 12"):
            self.provider.wait_for_confirmation(TX_HASH)

    def test_wait_for_confirmation_timeout(self):
        self.w3.eth.wait_for_transaction_receipt.side_effect = TimeoutError("not mined")
        with pytest.raises(ProviderError, match="not confirmed"):
            self.provider.wait_for_confirmation(TX_HASH)

    def test_deployed_address_is_checksummed(self):
        receipt = {'contractAddress': "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"}
        assert self.provider.deployed_address(receipt) == "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"

    def test_deployed_address_missing(self):
        with pytest.raises(ProviderError):
            self.provider.deployed_address({'contractAddress': None})

    def test_has_code(self):
        self.w3.eth.get_code.return_value = b""
        assert self.provider.has_code("0x1820a4B7618BdE71Dce8cdc73aAB6C95905faD24") is False

        self.w3.eth.get_code.return_value = b"\x60\x80"
        assert self.provider.has_code("0x1820a4B7618BdE71Dce8cdc73aAB6C95905faD24") is True

    def test_transfer(self):
        self.w3.eth.chain_id = 1337
        self.w3.eth.send_transaction.return_value = TX_HASH
        self.w3.eth.wait_for_transaction_receipt.return_value = {'status': 1, 'blockNumber': 3}

        self.provider.transfer(SENDER, "0xa990077c3205cbdf861e17fa532eeb069ce9ff96", 10)

        tx = self.w3.eth.send_transaction.call_args[0][0]
        assert tx['to'].lower() == "0xa990077c3205cbdf861e17fa532eeb069ce9ff96"
        assert tx['value'] == 10
        assert tx['chainId'] == 1337


class TestConnect:
    """Test class for Web3Provider.connect"""

    @patch('deployment.provider.Web3')
    def test_connect_unreachable(self, mock_web3):
        mock_web3.return_value.is_connected.return_value = False
        with pytest.raises(ProviderError, match="Could not connect"):
            Web3Provider.connect("http://127.0.0.1:8545")

    @patch('deployment.provider.ExtraDataToPOAMiddleware')
    @patch('deployment.provider.Web3')
    def test_connect_injects_poa_middleware(self, mock_web3, mock_middleware):
        w3 = mock_web3.return_value
        w3.is_connected.return_value = True

        provider = Web3Provider.connect("https://rinkeby.example.org", poa=True, confirmation_timeout=60)

        mock_web3.HTTPProvider.assert_called_once_with("https://rinkeby.example.org")
        w3.middleware_onion.inject.assert_called_once_with(mock_middleware, layer=0)
        assert provider.w3 is w3
        assert provider.confirmation_timeout == 60

    @patch('deployment.provider.Web3')
    def test_connect_without_poa(self, mock_web3):
        mock_web3.return_value.is_connected.return_value = True
        Web3Provider.connect("http://127.0.0.1:8545")
        mock_web3.return_value.middleware_onion.inject.assert_not_called()
