"""
Static gate configuration.

Built explicitly from Django settings by the caller; nothing here is
initialized at import time.
"""
from dataclasses import dataclass, field
from typing import Any, Dict

from .errors import GateConfigurationError
from .utils import is_hex_address, normalize_address


TRANSFER_POLICY_FIRST = 'first'
TRANSFER_POLICY_REJECT = 'reject'
TRANSFER_POLICIES = (TRANSFER_POLICY_FIRST, TRANSFER_POLICY_REJECT)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded client-side retry schedule for payment verification."""
    max_attempts: int = 10
    base_delay_ms: int = 1000
    max_delay_ms: int = 5000

    def delay_ms(self, attempt: int) -> int:
        """Delay to wait before the given (1-based) attempt."""
        if attempt <= 1:
            return 0
        return min(self.base_delay_ms * attempt, self.max_delay_ms)

    def to_dict(self) -> Dict[str, int]:
        return {
            'maxAttempts': self.max_attempts,
            'baseDelayMs': self.base_delay_ms,
            'maxDelayMs': self.max_delay_ms,
        }


@dataclass(frozen=True)
class GateConfig:
    network: str
    chain_id: int
    rpc_url: str
    token_address: str
    token_decimals: int
    token_symbol: str
    recipient: str
    explorer_url: str = ''
    rpc_timeout_seconds: int = 10
    multiple_transfer_policy: str = TRANSFER_POLICY_FIRST
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)

    def __post_init__(self):
        if not self.recipient:
            raise GateConfigurationError(
                'PAYGATE_RECIPIENT_ADDRESS is not configured.')
        if not is_hex_address(self.recipient):
            raise GateConfigurationError(
                f'Invalid recipient address: {self.recipient}')
        if not is_hex_address(self.token_address):
            raise GateConfigurationError(
                f'Invalid token address: {self.token_address}')
        object.__setattr__(self, 'recipient', normalize_address(self.recipient))
        object.__setattr__(self, 'token_address', normalize_address(self.token_address))
        if self.token_decimals < 0:
            raise GateConfigurationError(
                'Token decimals must be non-negative.')
        if self.multiple_transfer_policy not in TRANSFER_POLICIES:
            raise GateConfigurationError(
                f'Unknown transfer policy: {self.multiple_transfer_policy}')

    @classmethod
    def from_settings(cls, settings: Any) -> 'GateConfig':
        """
        Read the PAYGATE_* values from a Django settings object.

        Args:
            settings: ``django.conf.settings`` or any object with the same attributes

        Raises:
            GateConfigurationError: If a value is missing or invalid
        """
        return cls(
            network=getattr(settings, 'PAYGATE_NETWORK', 'avalanche-fuji'),
            chain_id=int(getattr(settings, 'PAYGATE_CHAIN_ID', 43113)),
            rpc_url=getattr(settings, 'PAYGATE_RPC_URL', ''),
            token_address=getattr(settings, 'PAYGATE_TOKEN_ADDRESS', ''),
            token_decimals=int(getattr(settings, 'PAYGATE_TOKEN_DECIMALS', 18)),
            token_symbol=getattr(settings, 'PAYGATE_TOKEN_SYMBOL', 'Tokens'),
            recipient=getattr(settings, 'PAYGATE_RECIPIENT_ADDRESS', ''),
            explorer_url=getattr(settings, 'PAYGATE_EXPLORER_URL', ''),
            rpc_timeout_seconds=int(
                getattr(settings, 'PAYGATE_RPC_TIMEOUT_SECONDS', 10)),
            multiple_transfer_policy=getattr(
                settings, 'PAYGATE_MULTIPLE_TRANSFER_POLICY', TRANSFER_POLICY_FIRST),
            retry_policy=RetryPolicy(
                max_attempts=int(
                    getattr(settings, 'PAYGATE_RETRY_MAX_ATTEMPTS', 10)),
                base_delay_ms=int(
                    getattr(settings, 'PAYGATE_RETRY_BASE_DELAY_MS', 1000)),
                max_delay_ms=int(
                    getattr(settings, 'PAYGATE_RETRY_MAX_DELAY_MS', 5000)),
            ),
        )
