"""
Wire models and transient on-chain records.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import PaymentFormatError
from .utils import is_hex_address


DECIMAL_AMOUNT_PATTERN = re.compile(r'[0-9]+(\.[0-9]+)?')
MINOR_UNITS_PATTERN = re.compile(r'[0-9]+')
TX_HASH_PATTERN = r'^0x[0-9a-fA-F]{64}$'
PAYMENT_HEADER = 'X-PAYMENT'


class PaymentRequirement(BaseModel):
    """What must be paid to unlock one resource. Serialized by alias."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    network: str
    chain_id: int = Field(alias='chainId')
    amount: str
    amount_wei: str = Field(alias='amountWei')
    token: str
    token_symbol: str = Field(alias='tokenSymbol')
    recipient: str
    description: str
    resource: str

    @field_validator('amount')
    @classmethod
    def _check_amount(cls, value: str) -> str:
        if not DECIMAL_AMOUNT_PATTERN.fullmatch(value):
            raise ValueError(f'Amount must be a non-negative decimal: {value}')
        return value

    @field_validator('amount_wei')
    @classmethod
    def _check_amount_wei(cls, value: str) -> str:
        if not MINOR_UNITS_PATTERN.fullmatch(value):
            raise ValueError(f'Minimal-unit amount must be an integer: {value}')
        return value

    @field_validator('recipient', 'token')
    @classmethod
    def _check_address(cls, value: str) -> str:
        if not is_hex_address(value):
            raise ValueError(f'Invalid address: {value}')
        return value

    @property
    def minor_units(self) -> int:
        return int(self.amount_wei)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class PaymentProof(BaseModel):
    """The caller's claim of having paid, carried in the X-PAYMENT header."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tx_hash: str = Field(alias='txHash', pattern=TX_HASH_PATTERN)
    network: str = Field(min_length=1)
    # Advisory only; the verifier reads the real amount from the chain.
    amount: Optional[str] = None

    @field_validator('amount', mode='before')
    @classmethod
    def _coerce_amount(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @classmethod
    def for_transaction(cls, tx_hash: str, network: str, amount: str = '0') -> 'PaymentProof':
        return cls(txHash=tx_hash, network=network, amount=amount)

    @classmethod
    def from_header(cls, raw: str) -> 'PaymentProof':
        """
        Parse the JSON X-PAYMENT header value.

        Raises:
            PaymentFormatError: If the value is not a well-formed proof
        """
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise PaymentFormatError() from exc

    def to_header(self) -> str:
        return self.model_dump_json(by_alias=True)


@dataclass(frozen=True)
class LogEntry:
    """One emitted event record: emitting address, 32-byte topics, data."""
    address: str
    topics: Tuple[bytes, ...] = ()
    data: bytes = b''


@dataclass(frozen=True)
class TransferRecord:
    """Execution outcome of a transaction, as read from its receipt."""
    status: bool
    block_number: int
    logs: Tuple[LogEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TokenTransfer:
    sender: str
    recipient: str
    value: int
    log_index: int


@dataclass
class VerificationResult:
    """Result of payment verification."""
    is_valid: bool
    payer: Optional[str] = None
    invalid_reason: Optional[str] = None
    retryable: bool = False
    details: Optional[Dict[str, Any]] = None
