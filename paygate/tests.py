import json
from unittest.mock import patch

from django.test import SimpleTestCase, override_settings
from django.urls import reverse
from web3 import Web3

from paygate.rpc import Web3ReceiptSource
from paygate.testing import (
    PAYER,
    RECIPIENT,
    TOKEN_ADDRESS,
    TX_HASH,
    StaticReceiptSource,
    make_config,
    receipt,
    transfer_log,
)
from paygate.verifier import PaymentVerifier
from paygate.views import _build_verifier


TEN_TOKENS = 10 * 10 ** 18


@override_settings(
    PAYGATE_RECIPIENT_ADDRESS=RECIPIENT,
    PAYGATE_TOKEN_ADDRESS=TOKEN_ADDRESS,
    PAYGATE_TOKEN_DECIMALS=18,
    PAYGATE_NETWORK='avalanche-fuji',
    PAYGATE_CHAIN_ID=43113,
    PAYGATE_MULTIPLE_TRANSFER_POLICY='first',
)
class ContentViewTests(SimpleTestCase):
    def setUp(self) -> None:
        self.source = StaticReceiptSource()
        patcher = patch(
            'paygate.views._build_verifier',
            side_effect=lambda config: PaymentVerifier(config, self.source),
        )
        self.build_verifier = patcher.start()
        self.addCleanup(patcher.stop)
        self.url = reverse('paygate:content', kwargs={'content_type': 'mystery'})

    def _proof(self, **overrides) -> str:
        proof = {'txHash': TX_HASH, 'network': 'avalanche-fuji', 'amount': '10'}
        proof.update(overrides)
        return json.dumps(proof)

    def test_without_proof_returns_requirement(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 402)
        body = response.json()
        self.assertEqual(body['error'], 'Payment Required')
        payment = body['payment']
        self.assertEqual(payment['amount'], '10')
        self.assertEqual(payment['amountWei'], str(TEN_TOKENS))
        self.assertEqual(payment['recipient'], Web3.to_checksum_address(RECIPIENT))
        self.assertEqual(payment['token'], Web3.to_checksum_address(TOKEN_ADDRESS))
        self.assertEqual(payment['chainId'], 43113)
        self.assertEqual(payment['resource'], '/api/content/mystery')
        self.assertEqual(self.source.calls, [])

    def test_unknown_content_type_is_not_found(self):
        url = reverse('paygate:content', kwargs={'content_type': 'premium'})

        response = self.client.get(url, HTTP_X_PAYMENT=self._proof())

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {'error': 'Invalid content type'})
        self.build_verifier.assert_not_called()

    def test_malformed_proof_is_rejected(self):
        for raw in ('not-json', '{}', json.dumps({'network': 'avalanche-fuji'}),
                    self._proof(txHash='0x1234'), '[1, 2]'):
            with self.subTest(raw=raw):
                response = self.client.get(self.url, HTTP_X_PAYMENT=raw)
                self.assertEqual(response.status_code, 402)
                self.assertEqual(response.json(), {'error': 'Invalid payment format'})
        self.assertEqual(self.source.calls, [])

    def test_verified_payment_returns_content(self):
        self.source.records[TX_HASH] = receipt([transfer_log(PAYER, RECIPIENT, TEN_TOKENS)])

        response = self.client.get(self.url, HTTP_X_PAYMENT=self._proof())

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['content']['title'], 'Mystery Box Unlocked!')
        self.assertEqual(body['content']['type'], 'mystery')
        self.assertIn('message', body['content']['curiosity'])

    def test_same_proof_can_be_reused(self):
        self.source.records[TX_HASH] = receipt([transfer_log(PAYER, RECIPIENT, TEN_TOKENS)])

        first = self.client.get(self.url, HTTP_X_PAYMENT=self._proof())
        second = self.client.get(self.url, HTTP_X_PAYMENT=self._proof())

        self.assertEqual(first.status_code, 200)
        self.assertEqual(second.status_code, 200)

    def test_advisory_amount_is_not_trusted(self):
        self.source.records[TX_HASH] = receipt([transfer_log(PAYER, RECIPIENT, 9 * 10 ** 18)])

        response = self.client.get(self.url, HTTP_X_PAYMENT=self._proof(amount='1000'))

        self.assertEqual(response.status_code, 402)
        self.assertEqual(response.json(), {'error': 'Insufficient payment amount.'})

    def test_pending_transaction(self):
        response = self.client.get(self.url, HTTP_X_PAYMENT=self._proof())

        self.assertEqual(response.status_code, 402)
        self.assertIn('not be mined yet', response.json()['error'])

    def test_wrong_network(self):
        response = self.client.get(self.url, HTTP_X_PAYMENT=self._proof(network='ethereum'))

        self.assertEqual(response.status_code, 402)
        self.assertEqual(response.json(), {'error': 'Unsupported payment network: ethereum'})

    def test_failed_transaction(self):
        self.source.records[TX_HASH] = receipt(
            [transfer_log(PAYER, RECIPIENT, TEN_TOKENS)], status=False)

        response = self.client.get(self.url, HTTP_X_PAYMENT=self._proof())

        self.assertEqual(response.status_code, 402)
        self.assertEqual(response.json(), {'error': 'Transaction execution failed on-chain.'})

    @override_settings(PAYGATE_RECIPIENT_ADDRESS='')
    def test_missing_recipient_is_misconfiguration(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'error': 'Payment gate misconfiguration.'})


@override_settings(PAYGATE_RECIPIENT_ADDRESS=RECIPIENT, PAYGATE_RETRY_MAX_ATTEMPTS=10)
class SupportedViewTests(SimpleTestCase):
    def test_describes_network_and_retry_policy(self):
        response = self.client.get(reverse('paygate:supported'))

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['network'], 'avalanche-fuji')
        self.assertEqual(body['chainId'], 43113)
        self.assertEqual(body['tokenDecimals'], 18)
        self.assertEqual(
            body['retryPolicy'],
            {'maxAttempts': 10, 'baseDelayMs': 1000, 'maxDelayMs': 5000},
        )


class CoreViewTests(SimpleTestCase):
    def test_health(self):
        response = self.client.get(reverse('health'))
        self.assertEqual(response.json(), {'status': 'ok'})

    def test_home(self):
        response = self.client.get(reverse('home'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, '/api/content/mystery')


class BuildVerifierTests(SimpleTestCase):
    @patch('paygate.rpc.Web3')
    @patch('paygate.rpc.HTTPProvider')
    def test_uses_web3_receipt_source_from_config(self, provider, web3):
        config = make_config(rpc_url='https://rpc.example/ext/bc/C/rpc', rpc_timeout_seconds=7)

        verifier = _build_verifier(config)

        self.assertIs(verifier.config, config)
        self.assertIsInstance(verifier.receipt_source, Web3ReceiptSource)
        self.assertIs(verifier.receipt_source.web3, web3.return_value)
        provider.assert_called_once_with(
            'https://rpc.example/ext/bc/C/rpc', request_kwargs={'timeout': 7})
        web3.assert_called_once_with(provider.return_value)
