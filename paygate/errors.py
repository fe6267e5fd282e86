"""
Error taxonomy for the payment gate.

Every verification-path error carries a short ``reason`` that is returned to
the caller and a ``retryable`` flag used only for logging; callers tell
"try again" from "fatal" by exhausting their retry budget.
"""


class PaymentGateError(Exception):
    """Base error for payment gate failures."""

    reason = 'Payment verification failed.'
    retryable = False

    def __init__(self, message: str = None):
        super().__init__(message or self.reason)
        self.message = message or self.reason


class GateConfigurationError(PaymentGateError):
    """Raised when static gate configuration is missing or invalid."""

    reason = 'Payment gate misconfiguration.'


class UnknownResourceError(PaymentGateError):
    """Requested resource identifier is not in the price table."""

    reason = 'Invalid content type'


class PaymentRejectedError(PaymentGateError):
    """Base for errors that end a verification attempt with a 402."""


class PaymentFormatError(PaymentRejectedError):
    reason = 'Invalid payment format'


class NetworkMismatchError(PaymentRejectedError):
    reason = 'Unsupported payment network.'

    def __init__(self, network: str):
        super().__init__(f'Unsupported payment network: {network}')
        self.network = network


class NotYetMinedError(PaymentRejectedError):
    reason = 'Transaction receipt not found. It may not be mined yet.'
    retryable = True


class ExecutionFailedError(PaymentRejectedError):
    reason = 'Transaction execution failed on-chain.'


class TransferNotFoundError(PaymentRejectedError):
    reason = 'No token transfer found in transaction.'


class AmbiguousTransferError(PaymentRejectedError):
    reason = 'Multiple token transfers found in transaction.'


class RecipientMismatchError(PaymentRejectedError):
    reason = 'Payment recipient mismatch.'


class InsufficientAmountError(PaymentRejectedError):
    reason = 'Insufficient payment amount.'


class MalformedLogError(ValueError):
    """A log entry does not have the fixed-width layout of a token transfer."""
