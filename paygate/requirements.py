"""
Requirement issuer: derives the payment requirement for a resource.
"""
from decimal import Decimal, InvalidOperation, localcontext
from typing import Mapping, Union

from .catalog import ContentKind, PriceEntry
from .config import GateConfig
from .errors import UnknownResourceError
from .types import DECIMAL_AMOUNT_PATTERN, PaymentRequirement


def parse_units(amount: str, decimals: int) -> int:
    """
    Scale a human decimal amount to the token's minimal unit, exactly.

    Args:
        amount: Non-negative decimal string, e.g. "10" or "0.25"
        decimals: Token decimal exponent

    Returns:
        amount * 10**decimals as an integer

    Raises:
        ValueError: If the amount is malformed or finer than one minimal unit
    """
    if not isinstance(amount, str) or not DECIMAL_AMOUNT_PATTERN.fullmatch(amount):
        raise ValueError(f'Amount must be a non-negative decimal: {amount!r}')
    try:
        value = Decimal(amount)
    except InvalidOperation as exc:
        raise ValueError(f'Invalid amount: {amount!r}') from exc

    with localcontext() as ctx:
        ctx.prec = len(value.as_tuple().digits) + decimals + 1
        scaled = value.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise ValueError(
                f'Amount {amount} has more than {decimals} decimal places.')
        return int(scaled)


def build_requirement(
    resource_id: Union[str, ContentKind],
    price_table: Mapping[ContentKind, PriceEntry],
    recipient: str,
    config: GateConfig,
) -> PaymentRequirement:
    """
    Build the requirement descriptor for one resource.

    Raises:
        UnknownResourceError: If ``resource_id`` is not a priced kind
    """
    kind = ContentKind.parse(resource_id)
    entry = price_table.get(kind)
    if entry is None:
        raise UnknownResourceError()

    return PaymentRequirement(
        network=config.network,
        chainId=config.chain_id,
        amount=entry.price,
        amountWei=str(parse_units(entry.price, config.token_decimals)),
        token=config.token_address,
        tokenSymbol=config.token_symbol,
        recipient=recipient,
        description=f'Access to {entry.title}',
        resource=kind.resource,
    )
