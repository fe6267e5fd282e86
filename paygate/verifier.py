"""
Payment verifier: validates a payment proof against a requirement by reading
the transaction receipt from the chain.
"""
from typing import List, Optional

from loguru import logger

from .config import TRANSFER_POLICY_REJECT, GateConfig
from .decoding import iter_token_transfers
from .errors import (
    AmbiguousTransferError,
    ExecutionFailedError,
    InsufficientAmountError,
    NetworkMismatchError,
    NotYetMinedError,
    PaymentGateError,
    RecipientMismatchError,
    TransferNotFoundError,
)
from .rpc import ReceiptSource, Web3ReceiptSource
from .types import (
    PaymentProof,
    PaymentRequirement,
    TokenTransfer,
    TransferRecord,
    VerificationResult,
)
from .utils import same_address


VERIFICATION_FAILED_REASON = 'Payment verification failed.'


class PaymentVerifier:
    """
    Stateless verifier for a single network and token.

    Each call performs at most one receipt fetch; retrying is the caller's job.
    """

    def __init__(self, config: GateConfig, receipt_source: Optional[ReceiptSource] = None):
        self.config = config
        self.receipt_source = receipt_source or Web3ReceiptSource.from_config(config)

    def verify(self, proof: PaymentProof, requirement: PaymentRequirement) -> VerificationResult:
        """
        Verify a payment proof. Never raises; inconclusive checks reject.
        """
        logger.debug('Verifying payment tx={} recipient={} amount={}',
                     proof.tx_hash, requirement.recipient, requirement.amount)
        try:
            transfer, record = self._check(proof, requirement)
        except PaymentGateError as exc:
            logger.info('Payment rejected for tx {}: {}', proof.tx_hash, exc.message)
            return VerificationResult(
                is_valid=False,
                invalid_reason=exc.message,
                retryable=exc.retryable,
            )
        except Exception:
            logger.exception('Payment verification error for tx {}', proof.tx_hash)
            return VerificationResult(
                is_valid=False,
                invalid_reason=VERIFICATION_FAILED_REASON,
                retryable=True,
            )

        logger.info('Payment verified: tx={} from={} to={} amount={} block={}',
                    proof.tx_hash, transfer.sender, transfer.recipient,
                    transfer.value, record.block_number)
        return VerificationResult(
            is_valid=True,
            payer=transfer.sender,
            details={
                'txHash': proof.tx_hash,
                'from': transfer.sender,
                'to': transfer.recipient,
                'amount': str(transfer.value),
                'requiredAmount': requirement.amount_wei,
                'blockNumber': record.block_number,
            },
        )

    def _check(self, proof: PaymentProof, requirement: PaymentRequirement):
        if proof.network != self.config.network:
            raise NetworkMismatchError(proof.network)

        record = self.receipt_source.get_transfer_record(proof.tx_hash)
        if record is None:
            raise NotYetMinedError()

        logger.debug('Receipt for {}: status={} block={} logs={}',
                     proof.tx_hash, record.status, record.block_number, len(record.logs))
        if not record.status:
            raise ExecutionFailedError()

        transfer = self._select_transfer(record)
        logger.debug('Transfer found: from={} to={} value={}',
                     transfer.sender, transfer.recipient, transfer.value)

        if not same_address(transfer.recipient, requirement.recipient):
            logger.debug('Recipient mismatch: got {} expected {}',
                         transfer.recipient, requirement.recipient)
            raise RecipientMismatchError()

        required = requirement.minor_units
        if transfer.value < required:
            logger.debug('Insufficient amount: got {} required {}',
                         transfer.value, required)
            raise InsufficientAmountError()

        return transfer, record

    def _select_transfer(self, record: TransferRecord) -> TokenTransfer:
        transfers: List[TokenTransfer] = list(
            iter_token_transfers(record.logs, self.config.token_address))
        if not transfers:
            raise TransferNotFoundError()
        if len(transfers) > 1:
            if self.config.multiple_transfer_policy == TRANSFER_POLICY_REJECT:
                raise AmbiguousTransferError()
            logger.debug('{} transfer events found, using the first', len(transfers))
        return transfers[0]
