"""
ERC-20 Transfer event decoding by fixed-width field extraction.
"""
from typing import Iterator, Sequence

from hexbytes import HexBytes
from loguru import logger

from .errors import MalformedLogError
from .types import LogEntry, TokenTransfer
from .utils import same_address


TOPIC_SIZE = 32
ADDRESS_SIZE = 20

# keccak256("Transfer(address,address,uint256)")
TRANSFER_EVENT_TOPIC = HexBytes(
    '0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef')


def topic_to_address(topic: bytes) -> str:
    """Extract the address held in the low 20 bytes of a 32-byte topic."""
    topic = bytes(topic)
    if len(topic) != TOPIC_SIZE:
        raise MalformedLogError(
            f'Topic must be {TOPIC_SIZE} bytes, got {len(topic)}')
    padding, raw = topic[:TOPIC_SIZE - ADDRESS_SIZE], topic[TOPIC_SIZE - ADDRESS_SIZE:]
    if any(padding):
        raise MalformedLogError('Address topic has non-zero padding')
    return '0x' + raw.hex()


def is_transfer_log(log: LogEntry, token_address: str) -> bool:
    if not same_address(log.address, token_address):
        return False
    if not log.topics:
        return False
    return bytes(log.topics[0]) == bytes(TRANSFER_EVENT_TOPIC)


def decode_transfer(log: LogEntry, log_index: int = 0) -> TokenTransfer:
    """
    Decode sender, receiver and value from a Transfer log.

    topics[1] = from, topics[2] = to, data = uint256 value (big-endian).

    Raises:
        MalformedLogError: If the log does not have the Transfer layout
    """
    if len(log.topics) < 3:
        raise MalformedLogError(
            f'Transfer log needs 3 topics, got {len(log.topics)}')
    data = bytes(log.data)
    if not data:
        raise MalformedLogError('Transfer log has empty data')

    return TokenTransfer(
        sender=topic_to_address(log.topics[1]),
        recipient=topic_to_address(log.topics[2]),
        value=int.from_bytes(data, 'big'),
        log_index=log_index,
    )


def iter_token_transfers(logs: Sequence[LogEntry], token_address: str) -> Iterator[TokenTransfer]:
    """Yield decodable Transfer events emitted by ``token_address``, in log order."""
    for index, log in enumerate(logs):
        if not is_transfer_log(log, token_address):
            continue
        try:
            transfer = decode_transfer(log, index)
        except MalformedLogError as exc:
            logger.debug('Skipping malformed transfer log {}: {}', index, exc)
            continue
        yield transfer
