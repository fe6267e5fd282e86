import unittest
from unittest.mock import MagicMock, patch

from hexbytes import HexBytes
from web3.exceptions import TransactionNotFound

from paygate.decoding import TRANSFER_EVENT_TOPIC
from paygate.rpc import Web3ReceiptSource, receipt_to_record
from paygate.testing import PAYER, RECIPIENT, TOKEN_ADDRESS, TX_HASH, address_topic, make_config


def _web3_receipt(status=1):
    return {
        'status': status,
        'blockNumber': 4242,
        'logs': [
            {
                'address': '0x81FeDE901c8415A412f3407f6cEDBCDDC89D888c',
                'topics': [
                    TRANSFER_EVENT_TOPIC,
                    HexBytes(address_topic(PAYER)),
                    HexBytes(address_topic(RECIPIENT)),
                ],
                'data': HexBytes((10 ** 18).to_bytes(32, 'big')),
            }
        ],
    }


class Web3ReceiptSourceTests(unittest.TestCase):
    @patch('paygate.rpc.Web3')
    @patch('paygate.rpc.HTTPProvider')
    def test_from_config_applies_rpc_url_and_timeout(self, provider, web3):
        config = make_config(rpc_timeout_seconds=7)

        source = Web3ReceiptSource.from_config(config)

        provider.assert_called_once_with(config.rpc_url, request_kwargs={'timeout': 7})
        web3.assert_called_once_with(provider.return_value)
        self.assertIs(source.web3, web3.return_value)

    def test_missing_receipt_returns_none(self):
        web3 = MagicMock()
        web3.eth.get_transaction_receipt.side_effect = TransactionNotFound('not found')

        self.assertIsNone(Web3ReceiptSource(web3).get_transfer_record(TX_HASH))

    def test_converts_receipt(self):
        web3 = MagicMock()
        web3.eth.get_transaction_receipt.return_value = _web3_receipt()

        record = Web3ReceiptSource(web3).get_transfer_record(TX_HASH)

        web3.eth.get_transaction_receipt.assert_called_once_with(HexBytes(TX_HASH))
        self.assertTrue(record.status)
        self.assertEqual(record.block_number, 4242)
        self.assertEqual(len(record.logs), 1)
        log = record.logs[0]
        self.assertEqual(log.address.lower(), TOKEN_ADDRESS)
        self.assertEqual(log.topics[2], address_topic(RECIPIENT))
        self.assertEqual(int.from_bytes(log.data, 'big'), 10 ** 18)

    def test_failed_status(self):
        self.assertFalse(receipt_to_record(_web3_receipt(status=0)).status)

    def test_accepts_hex_string_fields(self):
        receipt = _web3_receipt()
        receipt['logs'][0]['topics'] = [HexBytes(t).hex() for t in receipt['logs'][0]['topics']]
        receipt['logs'][0]['data'] = '0x' + (5).to_bytes(32, 'big').hex()

        record = receipt_to_record(receipt)
        self.assertEqual(record.logs[0].topics[0], bytes(TRANSFER_EVENT_TOPIC))
        self.assertEqual(int.from_bytes(record.logs[0].data, 'big'), 5)
