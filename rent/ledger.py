"""
Dues ledger - reconciles room rent against recorded payments.

Pure functions over immutable snapshots. Money is integer paise throughout.
Payments are attributed to tenants by exact, case-sensitive name match; see
``belongs_to``.
"""
import calendar
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from django.utils import timezone

from core.constants import DueStatus, DuesFilter, PaymentMethod
from core.dto import (
    DueResultDTO,
    DuesRowDTO,
    DuesSummaryDTO,
    MethodTotalDTO,
    OccupancyReportDTO,
    PaymentRecordDTO,
    RoomDTO,
    RoomRevenueDTO,
    TenantDTO,
)
from core.validators import PeriodValidator


@dataclass(frozen=True)
class BillingPeriod:
    """Inclusive date range"""
    start: date
    end: date

    def __post_init__(self):
        PeriodValidator.validate_bounds(self.start, self.end)

    def __contains__(self, day) -> bool:
        return day is not None and self.start <= day <= self.end

    @classmethod
    def for_month(cls, year: int, month: int) -> 'BillingPeriod':
        PeriodValidator.validate_month(year, month)
        last_day = calendar.monthrange(year, month)[1]
        return cls(date(year, month, 1), date(year, month, last_day))

    @classmethod
    def for_year(cls, year: int) -> 'BillingPeriod':
        return cls(date(year, 1, 1), date(year, 12, 31))

    @classmethod
    def current_month(cls, today: Optional[date] = None) -> 'BillingPeriod':
        today = today or timezone.localdate()
        return cls.for_month(today.year, today.month)


def belongs_to(payment: PaymentRecordDTO, tenant_name: str) -> bool:
    """Payment-to-tenant attribution (exact name)"""
    return payment.tenant_name == tenant_name


def _resolve_period(period_start: Optional[date], period_end: Optional[date]) -> BillingPeriod:
    if period_start is None and period_end is None:
        return BillingPeriod.current_month()
    PeriodValidator.validate_bounds(period_start, period_end)
    return BillingPeriod(period_start, period_end)


def amount_paid(tenant_name: str, payments: Iterable[PaymentRecordDTO],
                period_start: Optional[date] = None, period_end: Optional[date] = None) -> int:
    """
    Total paid by a tenant within [period_start, period_end].
    Defaults to the current calendar month when no bounds are given.

    Raises:
        ValidationError: only one bound given, or start after end
    """
    period = _resolve_period(period_start, period_end)
    return sum(
        payment.amount
        for payment in payments
        if belongs_to(payment, tenant_name) and payment.payment_date in period
    )


def find_room(room_number: Optional[str], rooms: Iterable[RoomDTO]) -> Optional[RoomDTO]:
    if not room_number:
        return None
    return next((room for room in rooms if room.room_number == room_number), None)


def _due_status(rent: int, paid: int) -> str:
    if paid >= rent:
        return DueStatus.PAID
    if paid > 0:
        return DueStatus.PARTIAL
    return DueStatus.PENDING


def outstanding_due(tenant: TenantDTO, room: Optional[RoomDTO], payments: Iterable[PaymentRecordDTO],
                    period: Optional[BillingPeriod] = None) -> DueResultDTO:
    """
    Rent / Paid / Due for a tenant.

    A tenant without a room, or in a room with no rent configured, has no
    billing relationship: the result is NOT_APPLICABLE with ``due=None``
    rather than a misleading zero.
    """
    period = period or BillingPeriod.current_month()
    paid = amount_paid(tenant.name, payments, period.start, period.end)

    if not tenant.room_number or room is None or room.rent <= 0:
        return DueResultDTO(applicable=False, status=DueStatus.NOT_APPLICABLE, paid=paid)

    return DueResultDTO(
        applicable=True,
        status=_due_status(room.rent, paid),
        paid=paid,
        rent=room.rent,
        due=max(0, room.rent - paid),
    )


def revenue_for_room(room: RoomDTO, tenants: Iterable[TenantDTO], payments: Iterable[PaymentRecordDTO]) -> int:
    """
    All-time payments by tenants currently assigned to the room.
    Former occupants are not tracked.
    """
    names = [tenant.name for tenant in tenants if tenant.room_number == room.room_number]
    return sum(
        payment.amount
        for payment in payments
        if any(belongs_to(payment, name) for name in names)
    )


def revenue_by_room(rooms: Sequence[RoomDTO], tenants: Sequence[TenantDTO],
                    payments: Sequence[PaymentRecordDTO]) -> List[RoomRevenueDTO]:
    """revenue_for_room for every room, in room order"""
    return [
        RoomRevenueDTO(
            room=room,
            tenant_names=tuple(t.name for t in tenants if t.room_number == room.room_number),
            revenue=revenue_for_room(room, tenants, payments),
        )
        for room in rooms
    ]


def aggregate_dues(tenants: Iterable[TenantDTO], rooms: Sequence[RoomDTO], payments: Sequence[PaymentRecordDTO],
                   period: Optional[BillingPeriod] = None) -> List[DuesRowDTO]:
    """
    Dues report rows for every tenant in a priced room, in tenant order.
    Tenants without a priced room are left out.
    """
    period = period or BillingPeriod.current_month()
    rows = []
    for tenant in tenants:
        room = find_room(tenant.room_number, rooms)
        result = outstanding_due(tenant, room, payments, period)
        if not result.applicable:
            continue
        rows.append(DuesRowDTO(tenant=tenant, room=room, rent=result.rent, paid=result.paid, due=result.due))
    return rows


def summarize_dues(rows: Iterable[DuesRowDTO]) -> DuesSummaryDTO:
    """Totals shown above the dues table"""
    rows = list(rows)
    return DuesSummaryDTO(
        total_rent=sum(row.rent for row in rows),
        total_paid=sum(row.paid for row in rows),
        total_due=sum(row.due for row in rows),
        with_dues_count=sum(1 for row in rows if row.has_due),
        fully_paid_count=sum(1 for row in rows if not row.has_due),
    )


def filter_dues(rows: Iterable[DuesRowDTO], status: str = DuesFilter.ALL) -> List[DuesRowDTO]:
    if status == DuesFilter.HAS_DUES:
        return [row for row in rows if row.has_due]
    if status == DuesFilter.FULLY_PAID:
        return [row for row in rows if not row.has_due]
    return list(rows)


def sort_by_due(rows: Iterable[DuesRowDTO]) -> List[DuesRowDTO]:
    """Highest due first; ties keep their input order"""
    return sorted(rows, key=lambda row: row.due, reverse=True)


def revenue_for_period(payments: Iterable[PaymentRecordDTO], period: BillingPeriod) -> int:
    """Everything collected within the period"""
    return sum(payment.amount for payment in payments if payment.payment_date in period)


def payment_method_breakdown(payments: Iterable[PaymentRecordDTO],
                             period: Optional[BillingPeriod] = None) -> List[MethodTotalDTO]:
    """Count and total per payment method, in PaymentMethod order"""
    counts: Dict[str, int] = {method: 0 for method in PaymentMethod.ORDERED}
    totals: Dict[str, int] = {method: 0 for method in PaymentMethod.ORDERED}
    for payment in payments:
        if period is not None and payment.payment_date not in period:
            continue
        method = payment.method if payment.method in counts else PaymentMethod.OTHER
        counts[method] += 1
        totals[method] += payment.amount
    return [
        MethodTotalDTO(method=method, count=counts[method], total=totals[method])
        for method in PaymentMethod.ORDERED
    ]


def room_occupancy(rooms: Iterable[RoomDTO]) -> OccupancyReportDTO:
    """Bed-level occupancy across rooms"""
    rooms = tuple(rooms)
    total_beds = sum(room.capacity for room in rooms)
    occupied = sum(room.occupied_beds for room in rooms)
    return OccupancyReportDTO(
        rooms=rooms,
        total_rooms=len(rooms),
        total_beds=total_beds,
        occupied_beds=occupied,
        available_beds=total_beds - occupied,
        occupancy_rate=round(occupied / total_beds * 100, 2) if total_beds else 0.0,
    )
