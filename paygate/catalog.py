"""
Static content catalog: supported content kinds, their prices and payloads.
"""
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from .errors import UnknownResourceError


class ContentKind(str, Enum):
    MYSTERY = 'mystery'

    @classmethod
    def parse(cls, value: str) -> 'ContentKind':
        """
        Map an untyped path segment to a supported kind.

        Raises:
            UnknownResourceError: If the tag is not a supported kind
        """
        try:
            return cls(value)
        except ValueError as exc:
            raise UnknownResourceError() from exc

    @property
    def resource(self) -> str:
        return f'/api/content/{self.value}'


@dataclass(frozen=True)
class PriceEntry:
    price: str
    title: str


PRICE_TABLE: Dict[ContentKind, PriceEntry] = {
    ContentKind.MYSTERY: PriceEntry(price='10', title='Mystery Box Unlocked!'),
}


CURIOSITIES: List[Dict[str, str]] = [
    {
        'title': 'Avalanche Speed Record',
        'message': (
            'Avalanche can process over 4,500 transactions per second and '
            'achieve finality in under 2 seconds, one of the fastest '
            'blockchain platforms in the world!'
        ),
        'image': 'https://media3.giphy.com/media/3o7ZePMv221orZKz84/giphy.gif',
        'fact': 'Lightning Fast Performance',
    },
    {
        'title': 'The Three-Chain Architecture',
        'message': (
            'Avalanche uses a three-chain system: X-Chain for asset exchange, '
            'C-Chain for smart contracts and P-Chain for validator coordination.'
        ),
        'image': 'https://media2.giphy.com/media/DwsOh9IbCquaCnwJJw/giphy.gif',
        'fact': 'Triple Chain Innovation',
    },
    {
        'title': 'L1 Revolution',
        'message': (
            'Avalanche pioneered L1s: custom blockchain networks with their own '
            'rules, validators and virtual machines.'
        ),
        'image': 'https://media1.giphy.com/media/4qsokBIDFxwYAgAllg/giphy.gif',
        'fact': 'Infinite Scalability',
    },
    {
        'title': 'Energy Efficient Consensus',
        'message': (
            'The Avalanche consensus protocol uses a fraction of the energy of '
            'Proof-of-Work blockchains while maintaining security.'
        ),
        'image': 'https://media4.giphy.com/media/23xN9cYQSKwFy/giphy.gif',
        'fact': 'Eco-Friendly Blockchain',
    },
]


def build_content(kind: ContentKind, rng: random.Random = None) -> Dict[str, object]:
    """Payload returned once payment for ``kind`` is verified."""
    chooser = rng or random
    return {
        'title': PRICE_TABLE[kind].title,
        'curiosity': chooser.choice(CURIOSITIES),
        'type': kind.value,
    }
