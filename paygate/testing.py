"""
Test doubles for code that depends on a ReceiptSource.
"""
from typing import Dict, List, Optional, Sequence

from .config import GateConfig
from .decoding import TRANSFER_EVENT_TOPIC
from .rpc import ReceiptSource
from .types import LogEntry, TransferRecord


TOKEN_ADDRESS = '0x81fede901c8415a412f3407f6cedbcddc89d888c'
RECIPIENT = '0x' + 'aa' * 20
PAYER = '0x' + 'bb' * 20
TX_HASH = '0x' + 'ab' * 32


def make_config(**overrides) -> GateConfig:
    values = dict(
        network='avalanche-fuji',
        chain_id=43113,
        rpc_url='http://localhost:9650/ext/bc/C/rpc',
        token_address=TOKEN_ADDRESS,
        token_decimals=18,
        token_symbol='Tokens',
        recipient=RECIPIENT,
        explorer_url='https://testnet.snowtrace.io',
    )
    values.update(overrides)
    return GateConfig(**values)


def address_topic(address: str) -> bytes:
    """Left-pad a 20-byte address into a 32-byte topic."""
    return b'\x00' * 12 + bytes.fromhex(address[2:])


def transfer_log(sender: str, recipient: str, value: int,
                 token: str = TOKEN_ADDRESS) -> LogEntry:
    return LogEntry(
        address=token,
        topics=(bytes(TRANSFER_EVENT_TOPIC), address_topic(sender), address_topic(recipient)),
        data=value.to_bytes(32, 'big'),
    )


def receipt(logs: Sequence[LogEntry], status: bool = True, block_number: int = 1) -> TransferRecord:
    return TransferRecord(status=status, block_number=block_number, logs=tuple(logs))


class StaticReceiptSource(ReceiptSource):
    """Serves receipts from a dict keyed by transaction hash."""

    def __init__(self, records: Optional[Dict[str, TransferRecord]] = None,
                 error: Optional[Exception] = None):
        self.records = {k.lower(): v for k, v in (records or {}).items()}
        self.error = error
        self.calls: List[str] = []

    def get_transfer_record(self, tx_hash: str) -> Optional[TransferRecord]:
        self.calls.append(tx_hash)
        if self.error is not None:
            raise self.error
        return self.records.get(tx_hash.lower())
