"""
Payment-gated content views.
"""
from django.conf import settings
from loguru import logger
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from paygate.catalog import PRICE_TABLE, ContentKind, build_content
from paygate.config import GateConfig
from paygate.errors import GateConfigurationError, UnknownResourceError
from paygate.gate import require_payment
from paygate.requirements import build_requirement
from paygate.verifier import PaymentVerifier


def _build_verifier(config: GateConfig) -> PaymentVerifier:
    return PaymentVerifier(config)


def _misconfiguration_response(exc: GateConfigurationError) -> Response:
    logger.error('payment gate misconfiguration: {}', exc.message)
    return Response(
        {'error': GateConfigurationError.reason},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class ContentView(APIView):
    """
    Serve content once an on-chain token payment is verified.

    Without an X-PAYMENT header the response is a 402 carrying the payment
    requirement for the requested content type.
    """
    authentication_classes: list = []
    permission_classes: list = []

    def get(self, request, content_type: str, *args, **kwargs):
        try:
            kind = ContentKind.parse(content_type)
        except UnknownResourceError as exc:
            logger.info('unknown content type requested: {}', content_type)
            return Response({'error': exc.message},
                            status=status.HTTP_404_NOT_FOUND)

        try:
            config = GateConfig.from_settings(settings)
            requirement = build_requirement(
                kind, PRICE_TABLE, config.recipient, config)
        except GateConfigurationError as exc:
            return _misconfiguration_response(exc)

        denied = require_payment(request, requirement, _build_verifier(config))
        if denied is not None:
            return denied

        return Response(
            {
                'success': True,
                'content': build_content(kind),
            },
            status=status.HTTP_200_OK,
        )


class PaymentSupportedView(APIView):
    """
    Describe the supported payment network, token and client retry policy.
    """
    authentication_classes: list = []
    permission_classes: list = []

    def get(self, request, *args, **kwargs):
        try:
            config = GateConfig.from_settings(settings)
        except GateConfigurationError as exc:
            return _misconfiguration_response(exc)

        return Response(
            {
                'network': config.network,
                'chainId': config.chain_id,
                'token': config.token_address,
                'tokenSymbol': config.token_symbol,
                'tokenDecimals': config.token_decimals,
                'explorerUrl': config.explorer_url,
                'retryPolicy': config.retry_policy.to_dict(),
            },
            status=status.HTTP_200_OK,
        )
