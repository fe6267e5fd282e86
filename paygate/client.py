"""
Client for payment-gated content.

Submits payment proof and re-polls the gate with a bounded, growing delay
until the payment transaction is mined and verified.
"""
import time
from typing import Any, Callable, Dict, Optional

import requests
from loguru import logger

from .config import RetryPolicy
from .types import PAYMENT_HEADER, PaymentProof, PaymentRequirement


DEFAULT_NETWORK = 'avalanche-fuji'


class PaymentClientError(Exception):
    """Base class for client-side payment errors."""

    pass


class PaymentVerificationTimeout(PaymentClientError):
    """Raised when verification did not succeed within the retry budget."""

    def __init__(self, attempts: int, last_reason: Optional[str] = None):
        super().__init__(
            last_reason
            or 'Payment verification failed after multiple attempts. Your payment '
               'was sent but verification timed out.'
        )
        self.attempts = attempts
        self.last_reason = last_reason


class ContentClient:
    def __init__(
        self,
        base_url: str,
        retry_policy: Optional[RetryPolicy] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        network: str = DEFAULT_NETWORK,
        timeout: float = 10,
    ):
        """
        Args:
            base_url: Server root, e.g. "http://localhost:8000"
            retry_policy: Verification retry schedule; defaults to 10 attempts
            session: requests.Session to send through
            sleep: Called with the delay in seconds between attempts
            network: Network name placed in the payment proof
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.retry_policy = retry_policy or RetryPolicy()
        self.session = session or requests.Session()
        self.sleep = sleep
        self.network = network
        self.timeout = timeout

    def _get(self, path: str, headers: Optional[Dict[str, str]] = None) -> requests.Response:
        try:
            return self.session.get(
                f'{self.base_url}{path}', headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise PaymentClientError(f'Request to {path} failed: {exc}') from exc

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError:
            return {}

    @classmethod
    def from_server(cls, base_url: str, **kwargs: Any) -> 'ContentClient':
        """Build a client using the retry policy advertised by the server."""
        client = cls(base_url, **kwargs)
        supported = client._json(client._get('/api/payment/supported'))
        policy = supported.get('retryPolicy') or {}
        client.retry_policy = RetryPolicy(
            max_attempts=int(policy.get('maxAttempts', client.retry_policy.max_attempts)),
            base_delay_ms=int(policy.get('baseDelayMs', client.retry_policy.base_delay_ms)),
            max_delay_ms=int(policy.get('maxDelayMs', client.retry_policy.max_delay_ms)),
        )
        client.network = supported.get('network', client.network)
        return client

    def fetch_requirement(self, content_type: str) -> PaymentRequirement:
        """
        Request content without proof and return the advertised requirement.

        Raises:
            PaymentClientError: If the server did not answer with a 402 requirement
        """
        response = self._get(f'/api/content/{content_type}')
        body = self._json(response)
        if response.status_code != 402 or 'payment' not in body:
            raise PaymentClientError(
                body.get('error') or f'Unexpected status {response.status_code}')
        return PaymentRequirement.model_validate(body['payment'])

    def unlock(self, content_type: str, tx_hash: str, amount: str = '0') -> Dict[str, Any]:
        """
        Submit payment proof until the gate accepts it.

        Returns:
            The unlocked content payload

        Raises:
            PaymentVerificationTimeout: If every attempt was rejected
            PaymentClientError: If a request could not be sent
        """
        proof = PaymentProof.for_transaction(tx_hash, self.network, amount)
        headers = {
            'Content-Type': 'application/json',
            PAYMENT_HEADER: proof.to_header(),
        }
        max_attempts = self.retry_policy.max_attempts
        last_reason = None

        for attempt in range(1, max_attempts + 1):
            delay_ms = self.retry_policy.delay_ms(attempt)
            if delay_ms:
                logger.debug('Waiting {}ms before verification attempt {}', delay_ms, attempt)
                self.sleep(delay_ms / 1000)

            logger.info('Verification attempt {}/{} for {}', attempt, max_attempts, tx_hash)
            response = self._get(f'/api/content/{content_type}', headers=headers)
            body = self._json(response)
            if response.ok:
                logger.info('Payment verified for {}', tx_hash)
                return body.get('content')

            last_reason = body.get('error')
            logger.info('Verification failed (attempt {}): {}', attempt, last_reason)

        raise PaymentVerificationTimeout(max_attempts, last_reason)


def transaction_url(tx_hash: str, explorer_url: str = 'https://testnet.snowtrace.io') -> str:
    return f'{explorer_url.rstrip("/")}/tx/{tx_hash}'
