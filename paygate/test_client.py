import json
import unittest
from unittest.mock import MagicMock

import requests

from paygate.client import (
    ContentClient,
    PaymentClientError,
    PaymentVerificationTimeout,
    transaction_url,
)
from paygate.config import RetryPolicy
from paygate.testing import RECIPIENT, TX_HASH


REQUIREMENT = {
    'network': 'avalanche-fuji',
    'chainId': 43113,
    'amount': '10',
    'amountWei': str(10 * 10 ** 18),
    'token': '0x81FeDE901c8415A412f3407f6cEDBCDDC89D888c',
    'tokenSymbol': 'Tokens',
    'recipient': RECIPIENT,
    'description': 'Access to Mystery Box Unlocked!',
    'resource': '/api/content/mystery',
}


def _response(status_code, body):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode()
    response.headers['Content-Type'] = 'application/json'
    return response


class ContentClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session = MagicMock()
        self.sleeps = []
        self.client = ContentClient(
            'http://testserver/', session=self.session, sleep=self.sleeps.append)

    def test_fetch_requirement(self):
        self.session.get.return_value = _response(
            402, {'error': 'Payment Required', 'payment': REQUIREMENT})

        requirement = self.client.fetch_requirement('mystery')

        self.assertEqual(requirement.amount_wei, str(10 * 10 ** 18))
        self.assertEqual(requirement.recipient, RECIPIENT)
        self.session.get.assert_called_once_with(
            'http://testserver/api/content/mystery', headers=None, timeout=10)

    def test_fetch_requirement_unknown_type(self):
        self.session.get.return_value = _response(404, {'error': 'Invalid content type'})

        with self.assertRaises(PaymentClientError) as ctx:
            self.client.fetch_requirement('premium')
        self.assertIn('Invalid content type', str(ctx.exception))

    def test_unlock_sends_proof_header(self):
        self.session.get.return_value = _response(
            200, {'success': True, 'content': {'type': 'mystery'}})

        content = self.client.unlock('mystery', TX_HASH, '10')

        self.assertEqual(content, {'type': 'mystery'})
        self.assertEqual(self.sleeps, [])
        headers = self.session.get.call_args.kwargs['headers']
        proof = json.loads(headers['X-PAYMENT'])
        self.assertEqual(proof, {'txHash': TX_HASH, 'network': 'avalanche-fuji', 'amount': '10'})

    def test_unlock_retries_with_growing_delay(self):
        pending = _response(402, {'error': 'Transaction receipt not found. It may not be mined yet.'})
        self.session.get.side_effect = [
            pending,
            pending,
            _response(200, {'success': True, 'content': {'type': 'mystery'}}),
        ]

        content = self.client.unlock('mystery', TX_HASH)

        self.assertEqual(content['type'], 'mystery')
        self.assertEqual(self.sleeps, [2.0, 3.0])
        self.assertEqual(self.session.get.call_count, 3)

    def test_unlock_gives_up_after_max_attempts(self):
        self.session.get.return_value = _response(402, {'error': 'Insufficient payment amount.'})

        with self.assertRaises(PaymentVerificationTimeout) as ctx:
            self.client.unlock('mystery', TX_HASH)

        self.assertEqual(self.session.get.call_count, 10)
        self.assertEqual(ctx.exception.attempts, 10)
        self.assertEqual(ctx.exception.last_reason, 'Insufficient payment amount.')
        self.assertEqual(self.sleeps, [2.0, 3.0, 4.0, 5.0, 5.0, 5.0, 5.0, 5.0, 5.0])

    def test_custom_retry_policy(self):
        client = ContentClient(
            'http://testserver', session=self.session, sleep=self.sleeps.append,
            retry_policy=RetryPolicy(max_attempts=2, base_delay_ms=100, max_delay_ms=150))
        self.session.get.return_value = _response(402, {'error': 'Invalid payment format'})

        with self.assertRaises(PaymentVerificationTimeout):
            client.unlock('mystery', TX_HASH)
        self.assertEqual(self.sleeps, [0.15])

    def test_transport_error_is_not_retried(self):
        self.session.get.side_effect = requests.ConnectionError('refused')

        with self.assertRaises(PaymentClientError):
            self.client.unlock('mystery', TX_HASH)
        self.assertEqual(self.session.get.call_count, 1)

    def test_from_server_reads_retry_policy(self):
        self.session.get.return_value = _response(200, {
            'network': 'avalanche-fuji',
            'retryPolicy': {'maxAttempts': 3, 'baseDelayMs': 500, 'maxDelayMs': 1000},
        })

        client = ContentClient.from_server('http://testserver', session=self.session)

        self.assertEqual(client.retry_policy, RetryPolicy(3, 500, 1000))
        self.session.get.assert_called_once_with(
            'http://testserver/api/payment/supported', headers=None, timeout=10)

    def test_transaction_url(self):
        self.assertEqual(
            transaction_url(TX_HASH), f'https://testnet.snowtrace.io/tx/{TX_HASH}')
