"""
Read-only blockchain access for the verifier.
"""
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from hexbytes import HexBytes
from loguru import logger
from web3 import HTTPProvider, Web3
from web3.exceptions import TransactionNotFound

from .config import GateConfig
from .types import LogEntry, TransferRecord


class ReceiptSource(ABC):
    """
    Abstract source of transaction execution receipts.
    """

    @abstractmethod
    def get_transfer_record(self, tx_hash: str) -> Optional[TransferRecord]:
        """
        Fetch the receipt for a transaction.

        Args:
            tx_hash: 0x-prefixed 32-byte transaction hash

        Returns:
            TransferRecord, or None if the transaction has no receipt yet
        """
        pass


class Web3ReceiptSource(ReceiptSource):
    """Receipt source backed by a JSON-RPC endpoint through web3."""

    def __init__(self, web3: Web3):
        self.web3 = web3

    @classmethod
    def from_config(cls, config: GateConfig) -> 'Web3ReceiptSource':
        provider = HTTPProvider(
            config.rpc_url,
            request_kwargs={'timeout': config.rpc_timeout_seconds},
        )
        return cls(Web3(provider))

    def get_transfer_record(self, tx_hash: str) -> Optional[TransferRecord]:
        try:
            receipt = self.web3.eth.get_transaction_receipt(HexBytes(tx_hash))
        except TransactionNotFound:
            logger.debug('No receipt for transaction {}', tx_hash)
            return None
        if receipt is None:
            return None
        return receipt_to_record(receipt)


def receipt_to_record(receipt: Mapping[str, Any]) -> TransferRecord:
    """Convert a web3 receipt mapping into a TransferRecord."""
    logs = tuple(
        LogEntry(
            address=str(log['address']),
            topics=tuple(bytes(HexBytes(topic)) for topic in log['topics']),
            data=bytes(HexBytes(log['data'])),
        )
        for log in receipt['logs']
    )
    return TransferRecord(
        status=int(receipt['status']) == 1,
        block_number=int(receipt['blockNumber']),
        logs=logs,
    )
