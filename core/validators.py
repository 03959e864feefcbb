"""
Validation utilities and validators.
Centralized validation logic following single responsibility principle.

Ingestion helpers (parse_amount, parse_discount, parse_date) are the only
place where malformed upstream data is silently normalized. Everything past
the serializers works on clean values.
"""
import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from django.utils.dateparse import parse_date as django_parse_date
from django.utils.dateparse import parse_datetime as django_parse_datetime

from core.constants import Currency, PaymentMethod
from core.exceptions import ValidationError

logger = logging.getLogger(__name__)

DISCOUNT_PATTERN = re.compile(r'\d+(?:\.\d+)?')
MAX_DISCOUNT_PERCENT = Decimal('100')


def parse_amount(value) -> int:
    """
    Convert a raw amount (number or numeric string, in rupees) to Money.

    Returns integer minor units (paise). Anything non-numeric, negative or
    non-finite is treated as 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        logger.debug("Coercing non-numeric amount %r to 0", value)
        return 0
    if not amount.is_finite() or amount < 0:
        logger.debug("Coercing invalid amount %r to 0", value)
        return 0
    return int((amount * Currency.MINOR_UNITS).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def to_major_units(amount: int) -> Decimal:
    """Money (paise) -> rupees with two decimal places"""
    return (Decimal(amount) / Currency.MINOR_UNITS).quantize(Decimal('0.01'))


def parse_discount(offer) -> Decimal:
    """
    Extract the discount percentage from free-text offer copy.

    "Save 15%" -> 15, "12.5% off" -> 12.5, "Limited time" -> 0.
    Capped at 100 so a discounted price can never go negative.
    """
    if not isinstance(offer, str) or not offer.strip():
        return Decimal('0')
    match = DISCOUNT_PATTERN.search(offer)
    if not match:
        return Decimal('0')
    return min(Decimal(match.group(0)), MAX_DISCOUNT_PERCENT)


def parse_date(value) -> Optional[date]:
    """Loosely parse a payment/join date. Unparseable input yields None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    try:
        parsed = django_parse_date(text)
        if parsed is None:
            parsed_dt = django_parse_datetime(text)
            parsed = parsed_dt.date() if parsed_dt else None
    except ValueError:
        parsed = None
    if parsed is None and text:
        logger.debug("Ignoring unparseable date %r", value)
    return parsed


def normalize_payment_method(value) -> str:
    """Map a raw method label onto PaymentMethod, case-insensitively"""
    if isinstance(value, str):
        for method in PaymentMethod.ORDERED:
            if value.strip().lower() == method.lower():
                return method
    return PaymentMethod.OTHER


class PeriodValidator:
    """Validates billing periods"""

    @staticmethod
    def validate_bounds(start, end):
        """Both bounds must be given together and in order"""
        if (start is None) != (end is None):
            raise ValidationError(
                message="malformed period",
                code="INVALID_PERIOD",
                details={
                    "start": start.isoformat() if start else None,
                    "end": end.isoformat() if end else None,
                }
            )
        if start is not None and start > end:
            raise ValidationError(
                message="malformed period",
                code="INVALID_PERIOD",
                details={"start": start.isoformat(), "end": end.isoformat()}
            )

    @staticmethod
    def validate_month(year: int, month: int):
        """Validate a calendar month"""
        if not 1 <= month <= 12:
            raise ValidationError(
                message="malformed period",
                code="INVALID_MONTH",
                details={"year": year, "month": month}
            )


class OccupancyValidator:
    """Validates room occupancy"""

    @staticmethod
    def clamp_occupied_beds(room_number: str, occupied: int, capacity: int) -> int:
        """Keep occupied beds within [0, capacity]"""
        capacity = max(capacity, 0)
        clamped = min(max(occupied, 0), capacity)
        if clamped != occupied:
            logger.warning(
                f"Room {room_number}: occupied beds {occupied} outside [0, {capacity}], using {clamped}"
            )
        return clamped
