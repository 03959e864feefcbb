from rest_framework import serializers

from api.fields import FeaturesField
from core.constants import DurationUnit, PlanAction
from core.dto import AccountSubscriptionState, PlanDTO


class PlanSerializer(serializers.Serializer):
    """Catalog plan; validates into a PlanDTO"""
    name = serializers.CharField(max_length=100)
    price = serializers.IntegerField(min_value=0, required=False, default=0)
    duration = serializers.IntegerField(min_value=1, required=False, default=1)
    duration_type = serializers.CharField(max_length=10, required=False, default=DurationUnit.MONTH)
    offer = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    features = FeaturesField()

    def validate(self, attrs):
        return PlanDTO(
            name=attrs['name'],
            price=attrs.get('price') or 0,
            duration=attrs.get('duration') or 1,
            duration_type=(attrs.get('duration_type') or DurationUnit.MONTH).upper(),
            offer=attrs.get('offer') or None,
            features=attrs.get('features') or (),
        )

    def to_representation(self, instance):
        return {
            'name': instance.name,
            'price': instance.price,
            'duration': instance.duration,
            'duration_type': instance.duration_type,
            'offer': instance.offer,
            'features': list(instance.features),
        }


class AccountStateSerializer(serializers.Serializer):
    """Subscription fields of the admin account; validates into AccountSubscriptionState"""
    current_plan = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    subscription_start_date = serializers.DateTimeField(required=False, allow_null=True, default=None)
    subscription_end_date = serializers.DateTimeField(required=False, allow_null=True, default=None)

    def validate(self, attrs):
        return AccountSubscriptionState(
            current_plan=attrs.get('current_plan') or None,
            subscription_start_date=attrs.get('subscription_start_date'),
            subscription_end_date=attrs.get('subscription_end_date'),
        )


class PlanPriceSerializer(serializers.Serializer):
    """Read-only price breakdown"""
    base_price = serializers.IntegerField(read_only=True)
    effective_price = serializers.IntegerField(read_only=True)
    discount_percent = serializers.DecimalField(max_digits=6, decimal_places=2, coerce_to_string=False, read_only=True)
    has_discount = serializers.BooleanField(read_only=True)


class PlanOptionSerializer(serializers.Serializer):
    """One row of the plan picker"""
    plan = PlanSerializer(read_only=True)
    price = PlanPriceSerializer(read_only=True)
    selectable = serializers.BooleanField(read_only=True)
    is_current = serializers.BooleanField(read_only=True)
    period_label = serializers.CharField(read_only=True)


class ActivationSerializer(serializers.Serializer):
    subscription_plan = serializers.CharField(read_only=True)
    subscription_start_date = serializers.DateTimeField(read_only=True)
    subscription_end_date = serializers.DateTimeField(read_only=True)


class OrderSerializer(serializers.Serializer):
    order_id = serializers.CharField(read_only=True)
    amount = serializers.IntegerField(read_only=True, help_text="Minor units, as reported by the gateway")
    currency = serializers.CharField(read_only=True)
    key_id = serializers.CharField(read_only=True, allow_null=True)


# Requests

class PlanOptionsRequestSerializer(serializers.Serializer):
    catalog = PlanSerializer(many=True)
    account = AccountStateSerializer(required=False)


class PlanPriceRequestSerializer(serializers.Serializer):
    plan = PlanSerializer()


class AccessRequestSerializer(serializers.Serializer):
    account = AccountStateSerializer()
    now = serializers.DateTimeField(required=False, allow_null=True, default=None)


class ConfirmPlanRequestSerializer(serializers.Serializer):
    catalog = PlanSerializer(many=True)
    account = AccountStateSerializer(required=False)
    plan_name = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)


class VerifyPaymentRequestSerializer(serializers.Serializer):
    order_id = serializers.CharField()
    payment_id = serializers.CharField()
    signature = serializers.CharField()
    catalog = PlanSerializer(many=True, required=False)


# Responses

class ConfirmPlanResponseSerializer(serializers.Serializer):
    status = serializers.SerializerMethodField()
    action = serializers.ChoiceField(choices=PlanAction.CHOICES, read_only=True)
    plan = PlanSerializer(read_only=True)
    price = PlanPriceSerializer(read_only=True)
    activation = ActivationSerializer(read_only=True, allow_null=True)
    order = OrderSerializer(read_only=True, allow_null=True)

    def get_status(self, obj):
        return 'success'
