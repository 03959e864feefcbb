"""
Gateway order registry.
Uses cache-based locking so a callback can activate an order at most once.
"""
import logging
from typing import Optional

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from core.constants import OrderStatus

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = 'subscription_order'
LOCK_TIMEOUT = 30
DEFAULT_ORDER_TTL = 60 * 60 * 24


def _get_cache_key(order_id):
    """Generate cache key for an order"""
    return f"{CACHE_KEY_PREFIX}:{order_id}"


def _get_lock_key(order_id):
    return f"{CACHE_KEY_PREFIX}:lock:{order_id}"


def _order_ttl():
    return getattr(settings, 'SUBSCRIPTION_ORDER_TTL', DEFAULT_ORDER_TTL)


class OrderRegistry:
    """Remembers which plan each gateway order was created for"""

    def record(self, order_id: str, plan_name: str, amount: int, currency: str,
               duration: Optional[int] = None, duration_type: Optional[str] = None) -> dict:
        order = {
            'order_id': order_id,
            'plan_name': plan_name,
            'duration': duration,
            'duration_type': duration_type,
            'amount': amount,
            'currency': currency,
            'status': OrderStatus.CREATED,
            'created_at': timezone.now().isoformat(),
            'activation': None,
        }
        cache.set(_get_cache_key(order_id), order, _order_ttl())
        return order

    def get(self, order_id: str) -> Optional[dict]:
        return cache.get(_get_cache_key(order_id))

    def mark_paid(self, order_id: str, payment_id: str, activation: dict) -> dict:
        order = dict(self.get(order_id) or {'order_id': order_id})
        order.update({
            'status': OrderStatus.PAID,
            'payment_id': payment_id,
            'paid_at': timezone.now().isoformat(),
            'activation': activation,
        })
        cache.set(_get_cache_key(order_id), order, _order_ttl())
        return order

    def acquire(self, order_id: str) -> bool:
        """Atomic claim on an order; False if another callback holds it"""
        return cache.add(_get_lock_key(order_id), True, LOCK_TIMEOUT)

    def release(self, order_id: str):
        cache.delete(_get_lock_key(order_id))
