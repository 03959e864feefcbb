import pytest
from django.core.cache import cache
from django.utils import timezone

from core.dto import PlanDTO


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def catalog():
    return [
        PlanDTO(name='FREE', price=0, duration=14, duration_type='DAY'),
        PlanDTO(name='BASIC', price=499, duration=1, duration_type='MONTH', features=('Rooms', 'Tenants')),
        PlanDTO(name='PREMIUM', price=1000, duration=3, duration_type='MONTH', offer='Save 15%'),
        PlanDTO(name='ENTERPRISE', price=2500, duration=12, duration_type='MONTH', offer='Limited time'),
    ]


@pytest.fixture
def now():
    return timezone.now()


class FakeGateway:
    """Stands in for RazorpayGateway"""
    key_id = 'rzp_test_key'

    def __init__(self, verified=True):
        self.verified = verified
        self.orders = []
        self.verifications = []

    def create_order(self, plan_name, amount):
        order_id = f'order_{len(self.orders) + 1}'
        self.orders.append((plan_name, amount))
        return {'order_id': order_id, 'amount': amount * 100, 'currency': 'INR'}

    def verify(self, order_id, payment_id, signature):
        self.verifications.append((order_id, payment_id, signature))
        return {'verified': self.verified}


class CountingActivator:
    """Records every activation"""

    def __init__(self):
        from subscriptions.activation import SubscriptionActivator
        self.inner = SubscriptionActivator()
        self.calls = []

    def activate(self, plan, now=None):
        self.calls.append(plan.name)
        return self.inner.activate(plan, now)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def activator():
    return CountingActivator()
