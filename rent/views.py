from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from rent import ledger
from rent.ledger import BillingPeriod
from rent.serializers import (
    BillingPeriodOutputSerializer,
    DueResultSerializer,
    DuesReportRequestSerializer,
    DuesRowSerializer,
    DuesSummarySerializer,
    MethodTotalSerializer,
    OccupancyReportSerializer,
    OccupancyRequestSerializer,
    RevenueRequestSerializer,
    RoomRevenueRequestSerializer,
    RoomRevenueSerializer,
    TenantDueRequestSerializer,
)
from api.fields import MoneyField


class RentViewSet(viewsets.ViewSet):
    """
    Dues and revenue reports.
    Rooms, tenants and payments are posted as snapshots; amounts are rupees.
    """

    def _validated(self, serializer_class, request):
        serializer = serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    @action(detail=False, methods=['post'], url_path='dues/tenant')
    def tenant_due(self, request):
        """Rent / Paid / Due for one tenant"""
        data = self._validated(TenantDueRequestSerializer, request)
        period = data.get('period') or BillingPeriod.current_month()
        tenant = data['tenant']
        room = ledger.find_room(tenant.room_number, data['rooms'])
        result = ledger.outstanding_due(tenant, room, data['payments'], period)
        return Response({
            'tenant': tenant.name,
            'room_number': tenant.room_number,
            'period': BillingPeriodOutputSerializer(period).data,
            **DueResultSerializer(result).data,
        })

    @action(detail=False, methods=['post'])
    def dues(self, request):
        """Due summary report"""
        data = self._validated(DuesReportRequestSerializer, request)
        period = data.get('period') or BillingPeriod.current_month()

        rows = ledger.aggregate_dues(data['tenants'], data['rooms'], data['payments'], period)
        summary = ledger.summarize_dues(rows)
        rows = ledger.filter_dues(rows, data['status'])
        if data['sort_by_due']:
            rows = ledger.sort_by_due(rows)

        return Response({
            'period': BillingPeriodOutputSerializer(period).data,
            'summary': DuesSummarySerializer(summary).data,
            'rows': DuesRowSerializer(rows, many=True).data,
        })

    @action(detail=False, methods=['post'], url_path='revenue/rooms')
    def room_revenue(self, request):
        """Revenue attributed to each room through its current tenants"""
        data = self._validated(RoomRevenueRequestSerializer, request)
        revenues = ledger.revenue_by_room(data['rooms'], data['tenants'], data['payments'])
        return Response({
            'rooms': RoomRevenueSerializer(revenues, many=True).data,
            'total': MoneyField().to_representation(sum(r.revenue for r in revenues)),
        })

    @action(detail=False, methods=['post'])
    def revenue(self, request):
        """Revenue for a month or a year, with a payment-method breakdown"""
        data = self._validated(RevenueRequestSerializer, request)
        period = data.get('period') or BillingPeriod.current_month()
        payments = data['payments']
        return Response({
            'period': BillingPeriodOutputSerializer(period).data,
            'total': MoneyField().to_representation(ledger.revenue_for_period(payments, period)),
            'payment_count': sum(1 for p in payments if p.payment_date in period),
            'methods': MethodTotalSerializer(ledger.payment_method_breakdown(payments, period), many=True).data,
        })

    @action(detail=False, methods=['post'])
    def occupancy(self, request):
        """Bed occupancy across rooms"""
        data = self._validated(OccupancyRequestSerializer, request)
        report = ledger.room_occupancy(data['rooms'])
        return Response(OccupancyReportSerializer(report).data)
