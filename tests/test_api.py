"""
Tests for the REST endpoints.
"""
from datetime import timedelta

import pytest
from dateutil.relativedelta import relativedelta
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from rest_framework.test import APIClient

from subscriptions.services import SubscriptionService
from subscriptions.views import SubscriptionViewSet

from tests.conftest import FakeGateway

CATALOG = [
    {'name': 'FREE', 'price': 0, 'duration': 14, 'duration_type': 'day'},
    {'name': 'BASIC', 'price': 499, 'duration': 1, 'duration_type': 'MONTH', 'features': '["Rooms", "Tenants"]'},
    {'name': 'PREMIUM', 'price': 1000, 'duration': 3, 'duration_type': 'MONTH', 'offer': 'Save 15%'},
]


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def fake_service(monkeypatch, gateway, activator):
    service = SubscriptionService(gateway=gateway, activator=activator)
    monkeypatch.setattr(SubscriptionViewSet, 'get_service', lambda self: service)
    return service


@pytest.fixture
def today():
    return timezone.localdate().isoformat()


# Subscriptions

def test_plans_for_new_registrant(client):
    response = client.post('/api/subscriptions/plans/', {
        'catalog': CATALOG,
        'account': {'current_plan': 'BASIC'},
    }, format='json')

    assert response.status_code == 200
    body = response.json()
    assert body['must_pay'] is True
    assert body['is_renewing'] is False
    assert body['access_state'] == 'PLAN_PENDING'
    assert [p['selectable'] for p in body['plans']] == [False, True, False]
    assert body['plans'][1]['plan']['features'] == ['Rooms', 'Tenants']
    assert body['plans'][0]['plan']['duration_type'] == 'DAY'
    assert body['plans'][2]['price']['effective_price'] == 850
    assert body['plans'][2]['period_label'] == 'for 3 months'


def test_plans_without_account(client):
    response = client.post('/api/subscriptions/plans/', {'catalog': CATALOG}, format='json')
    body = response.json()
    assert body['access_state'] == 'UNREGISTERED'
    assert all(p['selectable'] for p in body['plans'])


def test_price(client):
    response = client.post('/api/subscriptions/price/', {
        'plan': {'name': 'PREMIUM', 'price': 1000, 'offer': 'Save 15%'},
    }, format='json')

    assert response.status_code == 200
    assert response.json() == {
        'base_price': 1000,
        'effective_price': 850,
        'discount_percent': 15.0,
        'has_discount': True,
    }


def test_access_flags(client):
    now = timezone.now()
    response = client.post('/api/subscriptions/access/', {
        'account': {
            'current_plan': 'BASIC',
            'subscription_start_date': (now - timedelta(days=40)).isoformat(),
            'subscription_end_date': (now - timedelta(days=10)).isoformat(),
        },
        'now': now.isoformat(),
    }, format='json')

    body = response.json()
    assert body['is_expired'] is True
    assert body['must_pay'] is False
    assert body['is_renewing'] is True
    assert body['access_state'] == 'EXPIRED'


def test_confirm_free_plan(client, fake_service, gateway):
    response = client.post('/api/subscriptions/confirm/', {
        'catalog': CATALOG,
        'account': {'current_plan': 'FREE'},
        'plan_name': 'FREE',
    }, format='json')

    assert response.status_code == 200
    body = response.json()
    assert body['status'] == 'success'
    assert body['action'] == 'ACTIVATE_FREE'
    assert body['order'] is None
    assert body['activation']['subscription_plan'] == 'FREE'
    assert gateway.orders == []


def test_confirm_paid_plan_returns_order(client, fake_service):
    response = client.post('/api/subscriptions/confirm/', {
        'catalog': CATALOG,
        'plan_name': 'PREMIUM',
    }, format='json')

    assert response.status_code == 200
    body = response.json()
    assert body['action'] == 'CREATE_ORDER'
    assert body['activation'] is None
    assert body['order'] == {'order_id': 'order_1', 'amount': 85000, 'currency': 'INR', 'key_id': 'rzp_test_key'}


def test_confirm_without_plan_name(client, fake_service):
    response = client.post('/api/subscriptions/confirm/', {'catalog': CATALOG}, format='json')

    assert response.status_code == 400
    body = response.json()
    assert body['status'] == 'error'
    assert body['code'] == 'NO_PLAN_SELECTED'
    assert body['message'] == 'no plan selected'


def test_confirm_locked_plan(client, fake_service):
    response = client.post('/api/subscriptions/confirm/', {
        'catalog': CATALOG,
        'account': {'current_plan': 'BASIC'},
        'plan_name': 'PREMIUM',
    }, format='json')

    assert response.status_code == 409
    body = response.json()
    assert body['code'] == 'PLAN_LOCKED'
    assert body['details'] == {'requested': 'PREMIUM', 'assigned': 'BASIC'}


def test_confirm_unknown_plan(client, fake_service):
    response = client.post('/api/subscriptions/confirm/', {
        'catalog': CATALOG,
        'plan_name': 'GOLD',
    }, format='json')
    assert response.status_code == 404
    assert response.json()['code'] == 'NOT_FOUND'


def test_confirm_rejects_missing_catalog(client, fake_service):
    response = client.post('/api/subscriptions/confirm/', {'plan_name': 'BASIC'}, format='json')
    assert response.status_code == 400
    assert 'catalog' in response.json()


def test_verify_activates_once(client, fake_service, activator):
    client.post('/api/subscriptions/confirm/', {'catalog': CATALOG, 'plan_name': 'PREMIUM'}, format='json')
    payload = {
        'order_id': 'order_1',
        'payment_id': 'pay_1',
        'signature': 'sig',
        'catalog': CATALOG,
    }

    first = client.post('/api/subscriptions/verify/', payload, format='json')
    assert first.status_code == 200
    assert first.json()['already_activated'] is False
    assert first.json()['activation']['subscription_plan'] == 'PREMIUM'

    second = client.post('/api/subscriptions/verify/', payload, format='json')
    assert second.status_code == 200
    assert second.json()['already_activated'] is True
    assert activator.calls == ['PREMIUM']


def test_verify_without_catalog_keeps_plan_duration(client, fake_service):
    client.post('/api/subscriptions/confirm/', {'catalog': CATALOG, 'plan_name': 'PREMIUM'}, format='json')

    response = client.post('/api/subscriptions/verify/', {
        'order_id': 'order_1',
        'payment_id': 'pay_1',
        'signature': 'sig',
    }, format='json')

    assert response.status_code == 200
    activation = response.json()['activation']
    start = parse_datetime(activation['subscription_start_date'])
    end = parse_datetime(activation['subscription_end_date'])
    assert end == start + relativedelta(months=3)


def test_verify_bad_signature(client, monkeypatch, activator):
    service = SubscriptionService(gateway=FakeGateway(verified=False), activator=activator)
    monkeypatch.setattr(SubscriptionViewSet, 'get_service', lambda self: service)
    client.post('/api/subscriptions/confirm/', {'catalog': CATALOG, 'plan_name': 'PREMIUM'}, format='json')

    response = client.post('/api/subscriptions/verify/', {
        'order_id': 'order_1',
        'payment_id': 'pay_1',
        'signature': 'forged',
    }, format='json')

    assert response.status_code == 400
    assert response.json()['code'] == 'PAYMENT_VERIFICATION_FAILED'
    assert activator.calls == []


def test_verify_unknown_order(client, fake_service):
    response = client.post('/api/subscriptions/verify/', {
        'order_id': 'order_404',
        'payment_id': 'pay_1',
        'signature': 'sig',
    }, format='json')
    assert response.status_code == 404


# Rent

ROOMS = [
    {'room_number': 'R1', 'capacity': 3, 'occupied_beds': 2, 'rent': '5000'},
    {'room_number': 'R2', 'capacity': 2, 'occupied_beds': 1, 'rent': 4000},
]

TENANTS = [
    {'id': '1', 'name': 'Asha', 'room_number': 'R1'},
    {'id': '2', 'name': 'Ravi', 'room_number': 'R1'},
    {'id': '3', 'name': 'Meena', 'room_number': 'R2'},
    {'id': '4', 'name': 'Kiran', 'room_number': ''},
]


def test_tenant_due(client, today):
    response = client.post('/api/rent/dues/tenant/', {
        'tenant': TENANTS[0],
        'rooms': ROOMS,
        'payments': [
            {'tenant_name': 'Asha', 'amount': 2000, 'payment_date': today, 'method': 'upi'},
            {'tenant_name': 'Asha', 'amount': '1500', 'payment_date': today, 'method': 'Cash'},
        ],
    }, format='json')

    assert response.status_code == 200
    body = response.json()
    assert body['tenant'] == 'Asha'
    assert body['applicable'] is True
    assert body['rent'] == 5000.0
    assert body['paid'] == 3500.0
    assert body['due'] == 1500.0
    assert body['status'] == 'PARTIAL'


def test_tenant_due_without_room(client, today):
    response = client.post('/api/rent/dues/tenant/', {
        'tenant': TENANTS[3],
        'rooms': ROOMS,
        'payments': [{'tenant_name': 'Kiran', 'amount': 100, 'payment_date': today}],
    }, format='json')

    body = response.json()
    assert body['applicable'] is False
    assert body['status'] == 'NOT_APPLICABLE'
    assert body['due'] is None
    assert body['room_number'] is None


def test_tenant_due_treats_malformed_amount_as_zero(client, today):
    response = client.post('/api/rent/dues/tenant/', {
        'tenant': TENANTS[0],
        'rooms': ROOMS,
        'payments': [
            {'tenant_name': 'Asha', 'amount': 'two thousand', 'payment_date': today},
            {'tenant_name': 'Asha', 'amount': 1000, 'payment_date': 'not a date'},
        ],
    }, format='json')

    assert response.status_code == 200
    body = response.json()
    assert body['paid'] == 0.0
    assert body['due'] == 5000.0
    assert body['status'] == 'PENDING'


def test_tenant_due_for_explicit_month(client):
    response = client.post('/api/rent/dues/tenant/', {
        'tenant': TENANTS[0],
        'rooms': ROOMS,
        'payments': [
            {'tenant_name': 'Asha', 'amount': 5000, 'payment_date': '2026-03-05'},
            {'tenant_name': 'Asha', 'amount': 5000, 'payment_date': '2026-04-05'},
        ],
        'period': {'year': 2026, 'month': 3},
    }, format='json')

    body = response.json()
    assert body['period'] == {'start': '2026-03-01', 'end': '2026-03-31'}
    assert body['paid'] == 5000.0
    assert body['status'] == 'PAID'


def test_half_open_period_is_rejected(client):
    response = client.post('/api/rent/dues/tenant/', {
        'tenant': TENANTS[0],
        'rooms': ROOMS,
        'period': {'start': '2026-03-01'},
    }, format='json')

    assert response.status_code == 400
    body = response.json()
    assert body['code'] == 'INVALID_PERIOD'
    assert body['message'] == 'malformed period'


def test_invalid_month_is_rejected(client):
    response = client.post('/api/rent/revenue/', {'period': {'year': 2026, 'month': 13}}, format='json')
    assert response.status_code == 400
    assert response.json()['code'] == 'INVALID_MONTH'


def test_revenue_for_last_supported_month(client):
    response = client.post('/api/rent/revenue/', {
        'period': {'year': 9999, 'month': 12},
        'payments': [{'tenant_name': 'Asha', 'amount': 100, 'payment_date': '9999-12-31'}],
    }, format='json')

    assert response.status_code == 200
    body = response.json()
    assert body['period'] == {'start': '9999-12-01', 'end': '9999-12-31'}
    assert body['total'] == 100.0


def test_dues_report(client, today):
    payload = {
        'tenants': TENANTS,
        'rooms': ROOMS,
        'payments': [
            {'tenant_name': 'Asha', 'amount': 2000, 'payment_date': today},
            {'tenant_name': 'Ravi', 'amount': 5000, 'payment_date': today},
        ],
    }
    response = client.post('/api/rent/dues/', payload, format='json')

    assert response.status_code == 200
    body = response.json()
    assert [row['tenant']['name'] for row in body['rows']] == ['Asha', 'Ravi', 'Meena']
    assert body['summary'] == {
        'total_rent': 14000.0,
        'total_paid': 7000.0,
        'total_due': 7000.0,
        'with_dues_count': 2,
        'fully_paid_count': 1,
    }

    filtered = client.post('/api/rent/dues/', dict(payload, status='HAS_DUES', sort_by_due=True), format='json')
    body = filtered.json()
    assert [row['tenant']['name'] for row in body['rows']] == ['Meena', 'Asha']
    assert [row['due'] for row in body['rows']] == [4000.0, 3000.0]
    # summary covers every row, not just the filtered ones
    assert body['summary']['total_due'] == 7000.0


def test_dues_report_rejects_unknown_filter(client):
    response = client.post('/api/rent/dues/', {
        'tenants': TENANTS,
        'rooms': ROOMS,
        'status': 'OVERDUE',
    }, format='json')
    assert response.status_code == 400


def test_revenue_for_year(client):
    response = client.post('/api/rent/revenue/', {
        'period': {'year': 2026},
        'payments': [
            {'tenant_name': 'Asha', 'amount': 2000, 'payment_date': '2026-01-05', 'method': 'UPI'},
            {'tenant_name': 'Ravi', 'amount': 3000.5, 'payment_date': '2026-07-05', 'method': 'Cash'},
            {'tenant_name': 'Meena', 'amount': 4000, 'payment_date': '2025-12-31', 'method': 'Cash'},
        ],
    }, format='json')

    body = response.json()
    assert body['period'] == {'start': '2026-01-01', 'end': '2026-12-31'}
    assert body['total'] == 5000.5
    assert body['payment_count'] == 2
    methods = {m['method']: m for m in body['methods']}
    assert methods['UPI'] == {'method': 'UPI', 'count': 1, 'total': 2000.0}
    assert methods['Cash']['count'] == 1


def test_room_revenue(client, today):
    response = client.post('/api/rent/revenue/rooms/', {
        'rooms': ROOMS,
        'tenants': TENANTS,
        'payments': [
            {'tenant_name': 'Asha', 'amount': 2000, 'payment_date': today},
            {'tenant_name': 'Ravi', 'amount': 1000, 'payment_date': '2020-01-01'},
            {'tenant_name': 'Meena', 'amount': 4000, 'payment_date': today},
        ],
    }, format='json')

    body = response.json()
    assert [r['revenue'] for r in body['rooms']] == [3000.0, 4000.0]
    assert body['rooms'][0]['tenant_names'] == ['Asha', 'Ravi']
    assert body['total'] == 7000.0


def test_occupancy_clamps_beds(client):
    response = client.post('/api/rent/occupancy/', {
        'rooms': [
            {'room_number': 'R1', 'capacity': 2, 'occupied_beds': 5, 'rent': 3000},
            {'room_number': 'R2', 'capacity': 2, 'occupied_beds': 0, 'rent': 3000, 'status': 'available'},
        ],
    }, format='json')

    body = response.json()
    assert body['occupied_beds'] == 2
    assert body['available_beds'] == 2
    assert body['occupancy_rate'] == 50.0
    assert body['rooms'][0]['status'] == 'FULL'
    assert body['rooms'][0]['occupied_beds'] == 2
    assert body['rooms'][1]['status'] == 'AVAILABLE'


# Health and request ids

def test_health(client):
    response = client.get('/health/')
    assert response.status_code == 200
    assert response.json()['status'] == 'healthy'


def test_readiness(client):
    response = client.get('/health/ready/')
    assert response.status_code == 200
    assert response.json()['checks'] == {'cache': True}


def test_responses_carry_request_id(client):
    response = client.get('/health/')
    assert len(response['X-Request-ID']) == 8
