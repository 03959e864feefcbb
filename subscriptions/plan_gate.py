"""
Plan gating - pure decision functions for the subscription flow.

Decides which plans an admin account may pick, what each plan costs after
its offer is applied, and whether the account is blocked until it pays.
Nothing here touches storage, the gateway or the clock except through
arguments (``now`` defaults to ``timezone.now()``).
"""
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from django.utils import timezone

from core.constants import AccessState, DurationUnit, PlanAction
from core.dto import (
    AccountSubscriptionState,
    PlanDecision,
    PlanDTO,
    PlanOptionDTO,
    PlanPriceDTO,
)
from core.exceptions import NotFoundError, PlanLockedError, ValidationError
from core.validators import parse_discount


def compute_effective_price(plan: PlanDTO) -> PlanPriceDTO:
    """
    Apply the plan's offer to its base price.

    The first number in the offer text is read as a percentage; the result is
    rounded half-up to whole rupees. Offers without a number mean no discount.
    """
    base_price = max(int(plan.price or 0), 0)
    discount = parse_discount(plan.offer)
    discounted = Decimal(base_price) - Decimal(base_price) * discount / 100
    effective = int(discounted.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
    return PlanPriceDTO(
        base_price=base_price,
        effective_price=min(max(effective, 0), base_price),
        discount_percent=discount,
    )


def is_plan_selectable(plan: PlanDTO, current_plan_name: Optional[str], is_renewing: bool) -> bool:
    """
    A first-time account is locked to the plan it was assigned at registration.
    Once any subscription has existed, every plan is open.
    """
    if not current_plan_name or is_renewing:
        return True
    return plan.name == current_plan_name


def must_pay(current_plan_name: Optional[str], subscription_end_date: Optional[datetime]) -> bool:
    """Plan assigned but never activated: everything except profile/logout is blocked"""
    return bool(current_plan_name) and subscription_end_date is None


def is_expired(subscription_end_date: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """Expiry check consumed by the session layer"""
    if subscription_end_date is None:
        return False
    now = now or timezone.now()
    return now > subscription_end_date


def access_state(state: AccountSubscriptionState, now: Optional[datetime] = None) -> str:
    """Place an account on the UNREGISTERED -> PLAN_PENDING -> ACTIVE/EXPIRED machine"""
    if must_pay(state.current_plan, state.subscription_end_date):
        return AccessState.PLAN_PENDING
    if state.subscription_end_date is None:
        return AccessState.UNREGISTERED
    if is_expired(state.subscription_end_date, now):
        return AccessState.EXPIRED
    return AccessState.ACTIVE


def subscription_window(plan: PlanDTO, start: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Subscription start/end for a plan activated at ``start``.

    Month durations are calendar months (Jan 31 + 1 month = Feb 28/29).
    Unknown units fall back to one month.
    """
    start = start or timezone.now()
    unit = (plan.duration_type or '').upper()
    if unit == DurationUnit.DAY:
        end = start + relativedelta(days=plan.duration)
    elif unit == DurationUnit.MONTH:
        end = start + relativedelta(months=plan.duration)
    else:
        end = start + relativedelta(months=1)
    return start, end


def period_label(plan: PlanDTO) -> str:
    """'for 3 months', 'for 1 day'"""
    noun = 'month' if (plan.duration_type or '').upper() == DurationUnit.MONTH else 'day'
    plural = 's' if plan.duration > 1 else ''
    return f"for {plan.duration} {noun}{plural}"


def plan_options(catalog: Iterable[PlanDTO], state: AccountSubscriptionState) -> List[PlanOptionDTO]:
    """Priced, lock-aware view of the catalog, in catalog order"""
    return [
        PlanOptionDTO(
            plan=plan,
            price=compute_effective_price(plan),
            selectable=is_plan_selectable(plan, state.current_plan, state.is_renewing),
            is_current=plan.name == state.current_plan,
            period_label=period_label(plan),
        )
        for plan in catalog
    ]


def select_plan(catalog: Iterable[PlanDTO], plan_name: Optional[str], state: AccountSubscriptionState) -> PlanDTO:
    """
    Resolve a requested plan against the catalog and the account's lock.

    Raises:
        ValidationError: no plan name given
        NotFoundError: plan is not in the catalog
        PlanLockedError: account is still locked to its assigned plan
    """
    if not plan_name:
        raise ValidationError(message="no plan selected", code="NO_PLAN_SELECTED")

    plan = next((p for p in catalog if p.name == plan_name), None)
    if plan is None:
        raise NotFoundError(resource_type="Plan", resource_id=plan_name)

    if not is_plan_selectable(plan, state.current_plan, state.is_renewing):
        raise PlanLockedError(
            message=f"Only {state.current_plan} can be selected until it is activated",
            details={"requested": plan_name, "assigned": state.current_plan},
        )
    return plan


def confirm_plan(plan: Optional[PlanDTO], effective_price: int) -> PlanDecision:
    """
    Free plans activate directly; paid plans go through a gateway order.

    Raises:
        ValidationError: no plan selected
    """
    if plan is None:
        raise ValidationError(message="no plan selected", code="NO_PLAN_SELECTED")
    if effective_price == 0:
        return PlanDecision(action=PlanAction.ACTIVATE_FREE, plan=plan, amount=0)
    return PlanDecision(action=PlanAction.CREATE_ORDER, plan=plan, amount=effective_price)
