"""
Razorpay payment gateway collaborator.

Only two calls cross the boundary: creating an order for a paid plan and
verifying the checkout callback signature.
"""
import logging
import time
from typing import Optional

import razorpay
from django.conf import settings

from core.constants import Currency
from core.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


class RazorpayGateway:
    """Thin wrapper around ``razorpay.Client``"""

    def __init__(self, client: Optional[razorpay.Client] = None, currency: Optional[str] = None):
        self.client = client or razorpay.Client(
            auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
        )
        self.currency = currency or getattr(settings, 'RAZORPAY_CURRENCY', Currency.INR)

    @property
    def key_id(self) -> Optional[str]:
        return getattr(settings, 'RAZORPAY_KEY_ID', None)

    def create_order(self, plan_name: str, amount: int) -> dict:
        """
        Create an order for ``amount`` whole rupees.

        Returns:
            {'order_id', 'amount' (paise, as Razorpay reports it), 'currency'}
        """
        try:
            order = self.client.order.create({
                "amount": amount * Currency.MINOR_UNITS,  # paise
                "currency": self.currency,
                "receipt": f"sub_{int(time.time() * 1000)}",
                "notes": {
                    "plan_name": plan_name,
                },
            })
        except Exception as e:
            logger.error(f"Failed to create Razorpay order for {plan_name}: {e}", exc_info=True)
            raise PaymentGatewayError(
                message=f"Failed to create payment order: {e}",
                details={"plan_name": plan_name},
            ) from e

        return {
            "order_id": order["id"],
            "amount": order["amount"],
            "currency": order["currency"],
        }

    def verify(self, order_id: str, payment_id: str, signature: str) -> dict:
        """Check the HMAC signature Razorpay attaches to a checkout callback"""
        try:
            result = self.client.utility.verify_payment_signature({
                "razorpay_order_id": order_id,
                "razorpay_payment_id": payment_id,
                "razorpay_signature": signature,
            })
        except razorpay.errors.SignatureVerificationError:
            result = False

        if result is False:
            logger.warning(f"Signature mismatch for order {order_id}")
            return {"verified": False}
        return {"verified": True}
