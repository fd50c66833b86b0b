"""
Application exceptions, rendered to JSON by app.core.error_handlers.
"""

from typing import Any, Dict, List, Optional


class AppException(Exception):
    """Base class for every error the API raises on purpose."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(AppException):
    def __init__(
        self,
        message: str = "Authentification requise.",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, 401, "AUTHENTICATION_ERROR", details)


class AuthorizationError(AppException):
    """Hard 403: the caller may not touch this resource."""

    def __init__(
        self, message: str = "Accès refusé.", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, 403, "AUTHORIZATION_ERROR", details)


class NotFoundError(AppException):
    def __init__(self, resource: str, identifier: Any = None):
        if identifier is not None:
            message = f"{resource} with identifier '{identifier}' not found"
            details = {"resource": resource, "identifier": str(identifier)}
        else:
            message = f"{resource} not found"
            details = {"resource": resource}
        super().__init__(message, 404, "NOT_FOUND", details)


class ValidationError(AppException):
    """Field-level validation failure (422), same shape as request-model errors."""

    def __init__(self, message: str, fields: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, 422, "VALIDATION_ERROR", {"fields": fields or []})

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(
            f"Validation failed for field '{field}'",
            [{"field": field, "message": message, "type": "value_error"}],
        )


class BusinessRuleError(AppException):
    """
    A domain precondition does not hold (e.g. cancelling a completed booking).

    Nothing is changed; the message is surfaced to the user as a flash error.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 400, "BUSINESS_RULE_ERROR", details)
