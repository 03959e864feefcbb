"""
Data Transfer Objects (DTOs).
Immutable value objects passed between the ingestion boundary (serializers),
the billing core and the views.

Money fields are integer minor units (paise); plan prices are whole rupees.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from core.constants import DurationUnit, PaymentMethod, RoomStatus


@dataclass(frozen=True)
class PlanDTO:
    """Subscription plan as published by the catalog"""
    name: str
    price: int = 0
    duration: int = 1
    duration_type: str = DurationUnit.MONTH
    offer: Optional[str] = None
    features: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AccountSubscriptionState:
    """Subscription fields of an admin account"""
    current_plan: Optional[str] = None
    subscription_start_date: Optional[datetime] = None
    subscription_end_date: Optional[datetime] = None

    @property
    def is_renewing(self) -> bool:
        """An account that has held any subscription before"""
        return self.subscription_end_date is not None


@dataclass(frozen=True)
class PlanPriceDTO:
    """Price breakdown for a plan"""
    base_price: int
    effective_price: int
    discount_percent: Decimal = Decimal('0')

    @property
    def has_discount(self) -> bool:
        return self.discount_percent > 0


@dataclass(frozen=True)
class PlanOptionDTO:
    """One row of the plan picker"""
    plan: PlanDTO
    price: PlanPriceDTO
    selectable: bool
    is_current: bool
    period_label: str


@dataclass(frozen=True)
class PlanDecision:
    """Outcome of confirming a plan"""
    action: str
    plan: PlanDTO
    amount: int


@dataclass(frozen=True)
class PaymentRecordDTO:
    """Rent payment recorded against a tenant"""
    tenant_name: str
    amount: int = 0
    payment_date: Optional[date] = None
    method: str = PaymentMethod.OTHER
    tenant_id: Optional[str] = None
    transaction_id: Optional[str] = None
    details: str = ""


@dataclass(frozen=True)
class RoomDTO:
    """Room snapshot"""
    room_number: str
    capacity: int = 0
    occupied_beds: int = 0
    rent: int = 0
    status: Optional[str] = None

    @property
    def available_beds(self) -> int:
        return max(self.capacity - self.occupied_beds, 0)

    @property
    def effective_status(self) -> str:
        if self.status:
            return self.status
        return RoomStatus.FULL if self.occupied_beds >= self.capacity else RoomStatus.AVAILABLE


@dataclass(frozen=True)
class TenantDTO:
    """Tenant snapshot"""
    name: str
    id: Optional[str] = None
    room_number: Optional[str] = None
    join_date: Optional[date] = None


@dataclass(frozen=True)
class DueResultDTO:
    """Rent / Paid / Due for one tenant in one period"""
    applicable: bool
    status: str
    paid: int = 0
    rent: Optional[int] = None
    due: Optional[int] = None


@dataclass(frozen=True)
class DuesRowDTO:
    """Row of the dues report"""
    tenant: TenantDTO
    room: RoomDTO
    rent: int
    paid: int
    due: int

    @property
    def has_due(self) -> bool:
        return self.due > 0


@dataclass(frozen=True)
class DuesSummaryDTO:
    """Totals across a dues report"""
    total_rent: int = 0
    total_paid: int = 0
    total_due: int = 0
    with_dues_count: int = 0
    fully_paid_count: int = 0


@dataclass(frozen=True)
class MethodTotalDTO:
    """Collected amount for one payment method"""
    method: str
    count: int = 0
    total: int = 0


@dataclass(frozen=True)
class RoomRevenueDTO:
    """Revenue attributed to a room"""
    room: RoomDTO
    tenant_names: Tuple[str, ...] = field(default_factory=tuple)
    revenue: int = 0


@dataclass(frozen=True)
class OccupancyReportDTO:
    """Bed-level occupancy across rooms"""
    rooms: Tuple[RoomDTO, ...] = field(default_factory=tuple)
    total_rooms: int = 0
    total_beds: int = 0
    occupied_beds: int = 0
    available_beds: int = 0
    occupancy_rate: float = 0.0
