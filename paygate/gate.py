"""
The payment gate: turns an inbound request into "serve" or a 402 response.
"""
from typing import Optional

from loguru import logger
from rest_framework import status
from rest_framework.response import Response

from .errors import PaymentFormatError
from .types import PAYMENT_HEADER, PaymentProof, PaymentRequirement
from .verifier import PaymentVerifier


def payment_required_response(requirement: PaymentRequirement) -> Response:
    return Response(
        {
            'error': 'Payment Required',
            'payment': requirement.to_wire(),
        },
        status=status.HTTP_402_PAYMENT_REQUIRED,
    )


def require_payment(request, requirement: PaymentRequirement,
                    verifier: PaymentVerifier) -> Optional[Response]:
    """
    Check the request for a valid payment proof.

    Returns:
        None if payment is verified and the request may be serviced,
        otherwise a 402 Response
    """
    raw_proof = request.headers.get(PAYMENT_HEADER)
    if not raw_proof:
        logger.debug('No payment proof for {}', requirement.resource)
        return payment_required_response(requirement)

    try:
        proof = PaymentProof.from_header(raw_proof)
    except PaymentFormatError as exc:
        logger.info('Malformed payment proof for {}', requirement.resource)
        return Response({'error': exc.message},
                        status=status.HTTP_402_PAYMENT_REQUIRED)

    result = verifier.verify(proof, requirement)
    if not result.is_valid:
        return Response({'error': result.invalid_reason},
                        status=status.HTTP_402_PAYMENT_REQUIRED)

    return None
