from rest_framework import serializers

from api.fields import LenientDateField, MoneyField, PaymentMethodField
from core.constants import DuesFilter, PaymentMethod, RoomStatus
from core.dto import PaymentRecordDTO, RoomDTO, TenantDTO
from core.validators import OccupancyValidator
from rent.ledger import BillingPeriod


def _room_status(value):
    """Known statuses only; anything else is derived from occupancy"""
    value = (value or '').strip().upper()
    return value if value in (RoomStatus.AVAILABLE, RoomStatus.FULL) else None


class PaymentSerializer(serializers.Serializer):
    """Recorded tenant payment; validates into a PaymentRecordDTO"""
    tenant_name = serializers.CharField(allow_blank=True)
    tenant_id = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    amount = MoneyField()
    payment_date = LenientDateField()
    method = PaymentMethodField()
    transaction_id = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    details = serializers.CharField(required=False, allow_null=True, allow_blank=True, default='')

    def validate(self, attrs):
        return PaymentRecordDTO(
            tenant_name=attrs['tenant_name'],
            amount=attrs.get('amount') or 0,
            payment_date=attrs.get('payment_date'),
            method=attrs.get('method') or PaymentMethod.OTHER,
            tenant_id=attrs.get('tenant_id') or None,
            transaction_id=attrs.get('transaction_id') or None,
            details=attrs.get('details') or '',
        )

    def to_representation(self, instance):
        return {
            'tenant_name': instance.tenant_name,
            'tenant_id': instance.tenant_id,
            'amount': MoneyField().to_representation(instance.amount),
            'payment_date': instance.payment_date.isoformat() if instance.payment_date else None,
            'method': instance.method,
            'transaction_id': instance.transaction_id,
            'details': instance.details,
        }


class RoomSerializer(serializers.Serializer):
    """Room snapshot; validates into a RoomDTO with occupancy clamped to capacity"""
    room_number = serializers.CharField(max_length=20)
    capacity = serializers.IntegerField(min_value=0, required=False, default=0)
    occupied_beds = serializers.IntegerField(required=False, default=0)
    rent = MoneyField()
    status = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)

    def validate(self, attrs):
        capacity = attrs.get('capacity') or 0
        return RoomDTO(
            room_number=attrs['room_number'],
            capacity=capacity,
            occupied_beds=OccupancyValidator.clamp_occupied_beds(
                attrs['room_number'], attrs.get('occupied_beds') or 0, capacity
            ),
            rent=attrs.get('rent') or 0,
            status=_room_status(attrs.get('status')),
        )

    def to_representation(self, instance):
        return {
            'room_number': instance.room_number,
            'capacity': instance.capacity,
            'occupied_beds': instance.occupied_beds,
            'available_beds': instance.available_beds,
            'rent': MoneyField().to_representation(instance.rent),
            'status': instance.effective_status,
        }


class TenantSerializer(serializers.Serializer):
    """Tenant snapshot; blank room numbers mean "not assigned" """
    id = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    name = serializers.CharField(allow_blank=True)
    room_number = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    join_date = LenientDateField()

    def validate(self, attrs):
        room_number = (attrs.get('room_number') or '').strip()
        return TenantDTO(
            name=attrs['name'],
            id=attrs.get('id') or None,
            room_number=room_number or None,
            join_date=attrs.get('join_date'),
        )

    def to_representation(self, instance):
        return {
            'id': instance.id,
            'name': instance.name,
            'room_number': instance.room_number,
            'join_date': instance.join_date.isoformat() if instance.join_date else None,
        }


class PeriodSerializer(serializers.Serializer):
    """
    Billing period, given as a month, a whole year, or explicit bounds.
    Validates into a BillingPeriod; an empty period means the current month.
    """
    year = serializers.IntegerField(required=False, min_value=1900, max_value=9999)
    month = serializers.IntegerField(required=False)
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)

    def validate(self, attrs):
        year = attrs.get('year')
        month = attrs.get('month')
        if year is not None and month is not None:
            return BillingPeriod.for_month(year, month)
        if year is not None:
            return BillingPeriod.for_year(year)
        if month is not None:
            return BillingPeriod.for_month(BillingPeriod.current_month().start.year, month)
        if 'start' in attrs or 'end' in attrs:
            return BillingPeriod(attrs.get('start'), attrs.get('end'))
        return BillingPeriod.current_month()


class BillingPeriodOutputSerializer(serializers.Serializer):
    start = serializers.DateField(read_only=True)
    end = serializers.DateField(read_only=True)


class DueResultSerializer(serializers.Serializer):
    applicable = serializers.BooleanField(read_only=True)
    status = serializers.CharField(read_only=True)
    rent = MoneyField(read_only=True)
    paid = MoneyField(read_only=True)
    due = MoneyField(read_only=True)


class DuesRowSerializer(serializers.Serializer):
    tenant = TenantSerializer(read_only=True)
    room = RoomSerializer(read_only=True)
    rent = MoneyField(read_only=True)
    paid = MoneyField(read_only=True)
    due = MoneyField(read_only=True)
    has_due = serializers.BooleanField(read_only=True)


class DuesSummarySerializer(serializers.Serializer):
    total_rent = MoneyField(read_only=True)
    total_paid = MoneyField(read_only=True)
    total_due = MoneyField(read_only=True)
    with_dues_count = serializers.IntegerField(read_only=True)
    fully_paid_count = serializers.IntegerField(read_only=True)


class MethodTotalSerializer(serializers.Serializer):
    method = serializers.CharField(read_only=True)
    count = serializers.IntegerField(read_only=True)
    total = MoneyField(read_only=True)


class RoomRevenueSerializer(serializers.Serializer):
    room = RoomSerializer(read_only=True)
    tenant_names = serializers.ListField(child=serializers.CharField(), read_only=True)
    revenue = MoneyField(read_only=True)


class OccupancyReportSerializer(serializers.Serializer):
    rooms = RoomSerializer(many=True, read_only=True)
    total_rooms = serializers.IntegerField(read_only=True)
    total_beds = serializers.IntegerField(read_only=True)
    occupied_beds = serializers.IntegerField(read_only=True)
    available_beds = serializers.IntegerField(read_only=True)
    occupancy_rate = serializers.FloatField(read_only=True)


# Requests

class TenantDueRequestSerializer(serializers.Serializer):
    tenant = TenantSerializer()
    rooms = RoomSerializer(many=True, required=False, default=list)
    payments = PaymentSerializer(many=True, required=False, default=list)
    period = PeriodSerializer(required=False)


class DuesReportRequestSerializer(serializers.Serializer):
    tenants = TenantSerializer(many=True)
    rooms = RoomSerializer(many=True)
    payments = PaymentSerializer(many=True, required=False, default=list)
    period = PeriodSerializer(required=False)
    status = serializers.ChoiceField(choices=DuesFilter.CHOICES, required=False, default=DuesFilter.ALL)
    sort_by_due = serializers.BooleanField(required=False, default=False)


class RoomRevenueRequestSerializer(serializers.Serializer):
    rooms = RoomSerializer(many=True)
    tenants = TenantSerializer(many=True)
    payments = PaymentSerializer(many=True, required=False, default=list)


class RevenueRequestSerializer(serializers.Serializer):
    payments = PaymentSerializer(many=True, required=False, default=list)
    period = PeriodSerializer(required=False)


class OccupancyRequestSerializer(serializers.Serializer):
    rooms = RoomSerializer(many=True)
