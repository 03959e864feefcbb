"""
Subscription activation collaborator.

The account store lives outside this service, so the default activator only
computes the new window and reports it. Deployments point
``SUBSCRIPTION_ACTIVATOR`` at a class that also writes it back.
"""
import logging
from datetime import datetime
from typing import Optional

from django.conf import settings
from django.utils.module_loading import import_string

from core.dto import PlanDTO
from subscriptions.plan_gate import subscription_window

logger = logging.getLogger(__name__)

DEFAULT_ACTIVATOR = 'subscriptions.activation.SubscriptionActivator'


class SubscriptionActivator:
    """Computes the subscription window for a newly activated plan"""

    def activate(self, plan: PlanDTO, now: Optional[datetime] = None) -> dict:
        start, end = subscription_window(plan, now)
        logger.info(f"Subscription activated: {plan.name} ({start.isoformat()} -> {end.isoformat()})")
        return {
            'subscription_plan': plan.name,
            'subscription_start_date': start,
            'subscription_end_date': end,
        }


def get_activator():
    """Instantiate the activator configured in settings"""
    path = getattr(settings, 'SUBSCRIPTION_ACTIVATOR', None) or DEFAULT_ACTIVATOR
    return import_string(path)()
