"""
Service layer exceptions
Services raise these; the application maps them to HTTP responses
"""


class ServiceError(ValueError):
    """Base error of a business operation; maps to 400"""
    status_code = 400

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ServiceError):
    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class WebhookSignatureError(ServiceError):
    status_code = 401


class PaymentGatewayError(ServiceError):
    """Raised when the payment provider rejects a call or cannot be reached"""
    status_code = 502

    def __init__(self, message: str, status_code: int = None, provider_status: int = None):
        super().__init__(message, status_code)
        self.provider_status = provider_status
