"""
Application-wide constants.
Centralized constants following DRY principle.
"""

# Plan duration units
class DurationUnit:
    MONTH = 'MONTH'
    DAY = 'DAY'

    CHOICES = [
        (MONTH, 'Month'),
        (DAY, 'Day'),
    ]


# Payment methods (as recorded on tenant payments)
class PaymentMethod:
    CASH = 'Cash'
    UPI = 'UPI'
    NET_BANKING = 'Net Banking'
    ACCOUNT = 'Account'
    OTHER = 'Other'

    CHOICES = [
        (CASH, 'Cash'),
        (UPI, 'UPI'),
        (NET_BANKING, 'Net Banking'),
        (ACCOUNT, 'Account'),
        (OTHER, 'Other'),
    ]

    ORDERED = [CASH, UPI, NET_BANKING, ACCOUNT, OTHER]


# Room status
class RoomStatus:
    AVAILABLE = 'AVAILABLE'
    FULL = 'FULL'

    CHOICES = [
        (AVAILABLE, 'Available'),
        (FULL, 'Full'),
    ]


# Due status for a tenant in a billing period
class DueStatus:
    NOT_APPLICABLE = 'NOT_APPLICABLE'
    PENDING = 'PENDING'
    PARTIAL = 'PARTIAL'
    PAID = 'PAID'

    CHOICES = [
        (NOT_APPLICABLE, 'Not Applicable'),
        (PENDING, 'Pending'),
        (PARTIAL, 'Partial'),
        (PAID, 'Paid'),
    ]


# Dues report filters
class DuesFilter:
    ALL = 'ALL'
    HAS_DUES = 'HAS_DUES'
    FULLY_PAID = 'FULLY_PAID'

    CHOICES = [
        (ALL, 'All'),
        (HAS_DUES, 'Has Dues'),
        (FULLY_PAID, 'Fully Paid'),
    ]


# Account access states
class AccessState:
    UNREGISTERED = 'UNREGISTERED'
    PLAN_PENDING = 'PLAN_PENDING'
    ACTIVE = 'ACTIVE'
    EXPIRED = 'EXPIRED'

    CHOICES = [
        (UNREGISTERED, 'Unregistered'),
        (PLAN_PENDING, 'Plan Pending'),
        (ACTIVE, 'Active'),
        (EXPIRED, 'Expired'),
    ]


# Plan confirmation decisions
class PlanAction:
    ACTIVATE_FREE = 'ACTIVATE_FREE'
    CREATE_ORDER = 'CREATE_ORDER'

    CHOICES = [
        (ACTIVATE_FREE, 'Activate Free Plan'),
        (CREATE_ORDER, 'Create Payment Order'),
    ]


# Gateway order status
class OrderStatus:
    CREATED = 'CREATED'
    PAID = 'PAID'

    CHOICES = [
        (CREATED, 'Created'),
        (PAID, 'Paid'),
    ]


# Money
class Currency:
    INR = 'INR'
    MINOR_UNITS = 100  # paise per rupee
