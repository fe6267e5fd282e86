import unittest

from pydantic import ValidationError
from web3 import Web3

from paygate.catalog import PRICE_TABLE, ContentKind, PriceEntry, build_content
from paygate.errors import GateConfigurationError, UnknownResourceError
from paygate.requirements import build_requirement, parse_units
from paygate.testing import RECIPIENT, TOKEN_ADDRESS, make_config
from paygate.types import PaymentRequirement


class ParseUnitsTests(unittest.TestCase):
    def test_scales_whole_amount(self):
        self.assertEqual(parse_units('10', 18), 10 * 10 ** 18)

    def test_scales_fractional_amount(self):
        self.assertEqual(parse_units('0.25', 6), 250000)
        self.assertEqual(parse_units('0', 18), 0)

    def test_large_amounts_are_exact(self):
        amount = '123456789012345678901234567890.123456789012345678'
        self.assertEqual(
            parse_units(amount, 18),
            123456789012345678901234567890123456789012345678,
        )

    def test_rejects_more_decimals_than_token(self):
        with self.assertRaises(ValueError):
            parse_units('0.0000001', 6)

    def test_rejects_malformed_amounts(self):
        for amount in ('-1', '1e3', 'ten', '', '1.', 'NaN'):
            with self.subTest(amount=amount):
                with self.assertRaises(ValueError):
                    parse_units(amount, 18)

    def test_rejects_trailing_newline_and_non_ascii_digits(self):
        for amount in ('10\n', '\u0661\u0660', '1.\u0665'):
            with self.subTest(amount=amount):
                with self.assertRaises(ValueError):
                    parse_units(amount, 18)


class BuildRequirementTests(unittest.TestCase):
    def setUp(self) -> None:
        self.config = make_config()

    def test_builds_mystery_requirement(self):
        requirement = build_requirement('mystery', PRICE_TABLE, RECIPIENT, self.config)

        self.assertEqual(requirement.amount, '10')
        self.assertEqual(requirement.amount_wei, str(10 * 10 ** 18))
        self.assertEqual(requirement.minor_units, 10 * 10 ** 18)
        self.assertEqual(requirement.resource, '/api/content/mystery')
        self.assertEqual(requirement.description, 'Access to Mystery Box Unlocked!')
        self.assertEqual(requirement.recipient, RECIPIENT)
        self.assertEqual(requirement.token, self.config.token_address)

    def test_wire_shape_uses_camel_case(self):
        wire = build_requirement(
            ContentKind.MYSTERY, PRICE_TABLE, RECIPIENT, self.config).to_wire()

        self.assertEqual(
            set(wire),
            {'network', 'chainId', 'amount', 'amountWei', 'token', 'tokenSymbol',
             'recipient', 'description', 'resource'},
        )
        self.assertEqual(wire['chainId'], 43113)
        self.assertEqual(wire['network'], 'avalanche-fuji')
        self.assertEqual(wire['tokenSymbol'], 'Tokens')

    def test_is_deterministic(self):
        first = build_requirement('mystery', PRICE_TABLE, RECIPIENT, self.config)
        second = build_requirement('mystery', PRICE_TABLE, RECIPIENT, self.config)
        self.assertEqual(first, second)

    def test_unknown_resource(self):
        with self.assertRaises(UnknownResourceError):
            build_requirement('premium', PRICE_TABLE, RECIPIENT, self.config)

    def test_kind_missing_from_price_table(self):
        with self.assertRaises(UnknownResourceError):
            build_requirement(ContentKind.MYSTERY, {}, RECIPIENT, self.config)

    def test_rejects_invalid_recipient(self):
        with self.assertRaises(ValidationError):
            build_requirement('mystery', PRICE_TABLE, '0x1234', self.config)

    def test_rejects_recipient_without_prefix(self):
        with self.assertRaises(ValidationError):
            build_requirement('mystery', PRICE_TABLE, RECIPIENT[2:], self.config)

    def test_rejects_malformed_amounts_on_the_wire(self):
        wire = build_requirement('mystery', PRICE_TABLE, RECIPIENT, self.config).to_wire()
        for field, value in (('amount', '10\n'), ('amount', '\u0661\u0660'),
                             ('amountWei', '1.5'), ('amountWei', '10\n')):
            with self.subTest(field=field, value=value):
                with self.assertRaises(ValidationError):
                    PaymentRequirement.model_validate({**wire, field: value})

    def test_uses_configured_decimals(self):
        config = make_config(token_decimals=6)
        table = {ContentKind.MYSTERY: PriceEntry(price='1.5', title='Box')}
        requirement = build_requirement('mystery', table, RECIPIENT, config)
        self.assertEqual(requirement.amount_wei, '1500000')


class CatalogTests(unittest.TestCase):
    def test_price_table_covers_every_kind(self):
        self.assertEqual(set(PRICE_TABLE), set(ContentKind))

    def test_parse_rejects_unknown_tag(self):
        with self.assertRaises(UnknownResourceError):
            ContentKind.parse('MYSTERY')

    def test_build_content(self):
        content = build_content(ContentKind.MYSTERY)
        self.assertEqual(content['title'], 'Mystery Box Unlocked!')
        self.assertEqual(content['type'], 'mystery')
        self.assertIn('fact', content['curiosity'])


class GateConfigTests(unittest.TestCase):
    def test_requires_recipient(self):
        with self.assertRaises(GateConfigurationError):
            make_config(recipient='')

    def test_rejects_invalid_token_address(self):
        with self.assertRaises(GateConfigurationError):
            make_config(token_address='0xnothex')

    def test_rejects_addresses_without_prefix(self):
        for field, value in (('recipient', RECIPIENT[2:]), ('token_address', TOKEN_ADDRESS[2:])):
            with self.subTest(field=field):
                with self.assertRaises(GateConfigurationError):
                    make_config(**{field: value})

    def test_normalizes_addresses_to_checksum_form(self):
        config = make_config(recipient=RECIPIENT.upper().replace('0X', '0x'))
        self.assertEqual(config.recipient, Web3.to_checksum_address(RECIPIENT))
        self.assertEqual(config.token_address, Web3.to_checksum_address(TOKEN_ADDRESS))

    def test_rejects_unknown_transfer_policy(self):
        with self.assertRaises(GateConfigurationError):
            make_config(multiple_transfer_policy='sum')

    def test_retry_policy_schedule(self):
        policy = make_config().retry_policy
        self.assertEqual(
            [policy.delay_ms(n) for n in range(1, 8)],
            [0, 2000, 3000, 4000, 5000, 5000, 5000],
        )
        self.assertEqual(policy.max_attempts, 10)
