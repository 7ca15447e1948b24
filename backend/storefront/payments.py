# storefront/payments.py
import json
import logging

import stripe

from . import config, utils

logger = logging.getLogger(__name__)


class PaymentsNotConfigured(Exception):
    """Raised when no Stripe secret key is available."""


def is_configured() -> bool:
    return bool(config.STRIPE_SECRET_KEY)


def create_payment_intent(amount, order_data=None) -> str:
    """
    Create a Stripe PaymentIntent for ``amount`` (in major currency units)
    and return its client secret for the frontend to confirm the charge.

    The order payload travels along as JSON metadata so the charge can be
    matched to the order afterwards.
    """
    if not is_configured():
        raise PaymentsNotConfigured(
            "Payment processing is not configured. Please add Stripe API keys to enable checkout."
        )

    intent = stripe.PaymentIntent.create(
        amount=utils.to_cents(amount),
        currency=config.PAYMENT_CURRENCY,
        metadata={"orderData": json.dumps(order_data, default=str)},
        api_key=config.STRIPE_SECRET_KEY,
    )
    logger.info("Created payment intent %s for %s %s", intent.id, amount, config.PAYMENT_CURRENCY)
    return intent.client_secret
