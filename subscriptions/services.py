"""
Subscription service - orchestrates plan gating, the payment gateway and
subscription activation for the request handlers.
"""
from datetime import datetime
from typing import List, Optional, Sequence

from core.constants import DurationUnit, OrderStatus, PlanAction
from core.dto import AccountSubscriptionState, PlanDTO, PlanOptionDTO
from core.exceptions import (
    ConcurrentModificationError,
    NotFoundError,
    PaymentVerificationError,
)
from core.services import BaseService
from subscriptions import plan_gate
from subscriptions.activation import get_activator
from subscriptions.gateway import RazorpayGateway
from subscriptions.orders import OrderRegistry


class SubscriptionService(BaseService):
    """
    Service for the plan picker and checkout flow.
    Decisions come from plan_gate; this class only wires collaborators.
    """

    def __init__(self, gateway=None, activator=None, orders=None):
        super().__init__()
        self._gateway = gateway
        self.activator = activator or get_activator()
        self.orders = orders or OrderRegistry()

    @property
    def gateway(self):
        # Built lazily so free-plan activation works without gateway keys
        if self._gateway is None:
            self._gateway = RazorpayGateway()
        return self._gateway

    def get_plan_options(self, catalog: Sequence[PlanDTO], state: AccountSubscriptionState) -> List[PlanOptionDTO]:
        """Priced, lock-aware catalog for the plan picker"""
        return plan_gate.plan_options(catalog, state)

    def confirm(self, catalog: Sequence[PlanDTO], plan_name: Optional[str],
                state: AccountSubscriptionState, now: Optional[datetime] = None) -> dict:
        """
        Confirm the plan the admin picked.

        Args:
            catalog: Current plan catalog
            plan_name: Name of the chosen plan
            state: Account subscription state
            now: Activation time for free plans

        Returns:
            Dictionary with the decision and either the activation window
            (free plans) or the gateway order (paid plans)

        Raises:
            ValidationError: No plan selected
            NotFoundError: Plan not in catalog
            PlanLockedError: Account is locked to its assigned plan
            PaymentGatewayError: Order could not be created
        """
        plan = plan_gate.select_plan(catalog, plan_name, state)
        price = plan_gate.compute_effective_price(plan)
        decision = plan_gate.confirm_plan(plan, price.effective_price)

        result = {
            'action': decision.action,
            'plan': plan,
            'price': price,
            'activation': None,
            'order': None,
        }

        if decision.action == PlanAction.ACTIVATE_FREE:
            result['activation'] = self.activator.activate(plan, now)
            self.log_info(f"Free plan activated: {plan.name}", plan=plan.name)
            return result

        order = self.gateway.create_order(plan.name, decision.amount)
        self.orders.record(
            order['order_id'],
            plan.name,
            order['amount'],
            order['currency'],
            duration=plan.duration,
            duration_type=plan.duration_type,
        )
        result['order'] = dict(order, key_id=self.gateway.key_id)
        self.log_info(
            f"Payment order created for {plan.name}",
            order_id=order['order_id'],
            amount=decision.amount,
        )
        return result

    def verify_payment(self, order_id: str, payment_id: str, signature: str,
                       catalog: Sequence[PlanDTO] = (), now: Optional[datetime] = None) -> dict:
        """
        Handle the checkout callback: verify the signature, then activate the
        order's plan. A callback for an order that is already paid is a no-op.

        Raises:
            PaymentVerificationError: Signature does not match
            NotFoundError: Order id was never issued by this service
            ConcurrentModificationError: Another callback for the order is in flight
        """
        verification = self.gateway.verify(order_id, payment_id, signature)
        if not verification.get('verified'):
            self.log_warning("Payment verification failed", order_id=order_id)
            raise PaymentVerificationError(details={'order_id': order_id})

        order = self.orders.get(order_id)
        if not order:
            raise NotFoundError(resource_type="Payment order", resource_id=order_id)

        if order['status'] == OrderStatus.PAID:
            self.log_info("Order already activated", order_id=order_id)
            return {'order': order, 'activation': order['activation'], 'already_activated': True}

        if not self.orders.acquire(order_id):
            raise ConcurrentModificationError(
                message="Payment for this order is already being processed",
                details={'order_id': order_id},
            )

        try:
            # Re-read under the lock; a racing callback may have finished first
            order = self.orders.get(order_id) or order
            if order['status'] == OrderStatus.PAID:
                return {'order': order, 'activation': order['activation'], 'already_activated': True}

            plan = self._plan_for_order(order, catalog)
            activation = self.activator.activate(plan, now)
            order = self.orders.mark_paid(order_id, payment_id, activation)
            self.log_info(f"Payment verified, subscription activated: {plan.name}", order_id=order_id)
            return {'order': order, 'activation': activation, 'already_activated': False}
        finally:
            self.orders.release(order_id)

    def _plan_for_order(self, order: dict, catalog: Sequence[PlanDTO]) -> PlanDTO:
        """
        The plan the order was created for. The duration stored with the order
        wins; the posted catalog only covers orders recorded without one.
        """
        if order.get('duration'):
            return PlanDTO(
                name=order['plan_name'],
                duration=order['duration'],
                duration_type=order.get('duration_type') or DurationUnit.MONTH,
            )

        plan = next((p for p in catalog if p.name == order['plan_name']), None)
        if plan is None:
            self.log_warning("Order has no plan duration, using one month", order_id=order['order_id'])
            plan = PlanDTO(name=order['plan_name'])
        return plan
