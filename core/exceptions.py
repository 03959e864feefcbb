"""
Custom exceptions for the application.
Following domain-driven design principles with specific exception types.
"""


class BaseApplicationException(Exception):
    """Base exception for all application-specific exceptions"""
    default_message = "An application error occurred"
    default_code = "APPLICATION_ERROR"
    status_code = 500

    def __init__(self, message=None, code=None, details=None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BaseApplicationException):
    """Raised when validation fails"""
    default_message = "Validation failed"
    default_code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(BaseApplicationException):
    """Raised when a resource is not found"""
    default_message = "Resource not found"
    default_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource_type=None, resource_id=None, **kwargs):
        self.resource_type = resource_type
        self.resource_id = resource_id
        if 'message' not in kwargs and resource_type:
            kwargs['message'] = f"{resource_type} not found: {resource_id}"
        super().__init__(**kwargs)


class BusinessLogicError(BaseApplicationException):
    """Raised when business rule is violated"""
    default_message = "Business rule violation"
    default_code = "BUSINESS_RULE_VIOLATION"
    status_code = 409


class PlanLockedError(BusinessLogicError):
    """Raised when an account tries to pick a plan other than its pre-assigned one"""
    default_message = "Plan is locked until the assigned plan is activated"
    default_code = "PLAN_LOCKED"


class ConcurrentModificationError(BusinessLogicError):
    """Raised when concurrent modification is detected"""
    default_message = "Resource is being modified by another request"
    default_code = "CONCURRENT_MODIFICATION"


class PaymentVerificationError(BaseApplicationException):
    """Raised when the gateway rejects a payment callback"""
    default_message = "Invalid payment signature"
    default_code = "PAYMENT_VERIFICATION_FAILED"
    status_code = 400


class PaymentGatewayError(BaseApplicationException):
    """Raised when the payment gateway cannot be reached or errors out"""
    default_message = "Payment gateway error"
    default_code = "PAYMENT_GATEWAY_ERROR"
    status_code = 502
