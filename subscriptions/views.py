from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.dto import AccountSubscriptionState
from subscriptions import plan_gate
from subscriptions.serializers import (
    AccessRequestSerializer,
    ActivationSerializer,
    ConfirmPlanRequestSerializer,
    ConfirmPlanResponseSerializer,
    PlanOptionSerializer,
    PlanOptionsRequestSerializer,
    PlanPriceRequestSerializer,
    PlanPriceSerializer,
    VerifyPaymentRequestSerializer,
)
from subscriptions.services import SubscriptionService


class SubscriptionViewSet(viewsets.ViewSet):
    """
    Plan picker and checkout endpoints.
    Every request carries the catalog and account snapshot it should be
    decided against; nothing is read from storage.
    """

    def get_service(self):
        return SubscriptionService()

    def _validated(self, serializer_class, request):
        serializer = serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    @action(detail=False, methods=['post'])
    def plans(self, request):
        """Priced catalog with lock flags and the account's access state"""
        data = self._validated(PlanOptionsRequestSerializer, request)
        state = data.get('account') or AccountSubscriptionState()
        options = self.get_service().get_plan_options(data['catalog'], state)
        return Response({
            'plans': PlanOptionSerializer(options, many=True).data,
            'must_pay': plan_gate.must_pay(state.current_plan, state.subscription_end_date),
            'is_renewing': state.is_renewing,
            'access_state': plan_gate.access_state(state),
        })

    @action(detail=False, methods=['post'])
    def price(self, request):
        """Effective price of a single plan"""
        data = self._validated(PlanPriceRequestSerializer, request)
        price = plan_gate.compute_effective_price(data['plan'])
        return Response(PlanPriceSerializer(price).data)

    @action(detail=False, methods=['post'])
    def access(self, request):
        """Gating flags consumed by the session layer"""
        data = self._validated(AccessRequestSerializer, request)
        state = data['account']
        now = data.get('now')
        return Response({
            'must_pay': plan_gate.must_pay(state.current_plan, state.subscription_end_date),
            'is_expired': plan_gate.is_expired(state.subscription_end_date, now),
            'is_renewing': state.is_renewing,
            'access_state': plan_gate.access_state(state, now),
        })

    @action(detail=False, methods=['post'])
    def confirm(self, request):
        """
        Confirm the chosen plan.
        Free plans are activated immediately; paid plans return a gateway order.
        """
        data = self._validated(ConfirmPlanRequestSerializer, request)
        state = data.get('account') or AccountSubscriptionState()
        result = self.get_service().confirm(data['catalog'], data.get('plan_name'), state)
        return Response(ConfirmPlanResponseSerializer(result).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'])
    def verify(self, request):
        """Gateway checkout callback; repeated callbacks for a paid order are no-ops"""
        data = self._validated(VerifyPaymentRequestSerializer, request)
        result = self.get_service().verify_payment(
            data['order_id'],
            data['payment_id'],
            data['signature'],
            catalog=data.get('catalog') or (),
        )
        return Response({
            'status': 'success',
            'message': 'Payment verified and subscription activated',
            'order_id': result['order']['order_id'],
            'already_activated': result['already_activated'],
            'activation': ActivationSerializer(result['activation']).data if result['activation'] else None,
        })
