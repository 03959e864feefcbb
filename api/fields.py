"""
Lenient serializer fields for upstream snapshots.
Malformed amounts, dates and methods are normalized here, never downstream.
"""
import json
import logging

from rest_framework import serializers

from core.validators import normalize_payment_method, parse_amount, parse_date, to_major_units

logger = logging.getLogger(__name__)


class MoneyField(serializers.Field):
    """Rupees on the wire, integer paise inside. Non-numeric input reads as 0."""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        kwargs.setdefault('default', 0)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return parse_amount(data)

    def to_representation(self, value):
        if value is None:
            return None
        return to_major_units(value)


class LenientDateField(serializers.Field):
    """Accepts dates or datetimes in most ISO shapes; anything else is None"""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return parse_date(data)

    def to_representation(self, value):
        return value.isoformat() if value else None


class PaymentMethodField(serializers.Field):
    """Cash / UPI / Net Banking / Account; anything else becomes Other"""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return normalize_payment_method(data)

    def to_representation(self, value):
        return value


class FeaturesField(serializers.Field):
    """Feature list, given either as a list or as a JSON-encoded string"""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, str):
            try:
                data = json.loads(data or '[]')
            except ValueError:
                logger.debug("Error parsing features: %r", data)
                return ()
        if not isinstance(data, (list, tuple)):
            return ()
        return tuple(str(item) for item in data)

    def to_representation(self, value):
        return list(value or ())
