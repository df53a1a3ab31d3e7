"""
Domain Exceptions - Custom exceptions for domain-specific errors.
"""
from typing import Any, Dict, List, Optional, Sequence


class DomainException(Exception):
    """
    Base exception for all domain-related errors.

    All domain exceptions should inherit from this class to allow
    for consistent error handling across the application.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            'error': self.code,
            'message': self.message,
            'details': self.details
        }


class NotFoundError(DomainException):
    """Raised when a requested entity cannot be found."""

    def __init__(
        self,
        entity_type: str,
        entity_id: Optional[Any] = None,
        message: Optional[str] = None
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        msg = message or f"{entity_type} not found"
        if entity_id is not None and message is None:
            msg = f"{entity_type} with id '{entity_id}' not found"
        super().__init__(
            message=msg,
            code='ENTITY_NOT_FOUND',
            details={
                'entity_type': entity_type,
                'entity_id': str(entity_id) if entity_id is not None else None
            }
        )


class ShapeError(DomainException):
    """
    Raised when a payload is missing required top-level fields or
    carries values of the wrong primitive type.

    Collects every shape problem found, keyed by field path.
    """

    def __init__(
        self,
        message: str = "Malformed site payload",
        errors: Optional[Dict[str, List[str]]] = None
    ):
        self.errors = errors or {}
        super().__init__(
            message=message,
            code='SHAPE_ERROR',
            details={'validation_errors': self.errors}
        )

    def add_error(self, field: str, error: str) -> None:
        """Add a shape error for a specific field."""
        self.errors.setdefault(field, []).append(error)
        self.details['validation_errors'] = self.errors

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class FieldViolation(DomainException):
    """A single validation failure attached to one field path."""

    error_code = 'INVALID_FIELD'

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(
            message=message,
            code=self.error_code,
            details={'field': field}
        )

    def to_violation(self) -> Dict[str, str]:
        return {'field': self.field, 'error': self.code, 'message': self.message}


class MissingFieldError(FieldViolation):
    """Required field is absent or blank."""

    error_code = 'MISSING_FIELD'


class InvalidNumberError(FieldViolation):
    """Numeric field is not a number or is not strictly positive."""

    error_code = 'INVALID_NUMBER'


class InvalidTextError(FieldViolation):
    """Free-text field holds something other than a string."""

    error_code = 'INVALID_TEXT'


class InvalidEnumError(FieldViolation):
    """Value is not a member of the allowed set."""

    error_code = 'INVALID_ENUM'

    def __init__(self, field: str, value: Any, allowed: Sequence[str], message: Optional[str] = None):
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            field=field,
            message=message or f"Invalid {field} value '{value}'. Allowed: {', '.join(self.allowed)}"
        )
        self.details['allowed'] = self.allowed


class ValidationException(DomainException):
    """
    Raised when domain validation fails.

    Can contain multiple validation errors for different fields.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, list]] = None
    ):
        self.errors = errors or {}
        super().__init__(
            message=message,
            code='VALIDATION_ERROR',
            details={'validation_errors': self.errors}
        )


class SiteValidationError(ValidationException):
    """
    Aggregate of every violation found by one validation pass.

    The message joins all violation messages so callers can report
    them together.
    """

    def __init__(self, violations: Sequence[FieldViolation]):
        self.violations = list(violations)
        errors: Dict[str, list] = {}
        for violation in self.violations:
            errors.setdefault(violation.field, []).append(violation.message)
        super().__init__(
            message=', '.join(v.message for v in self.violations),
            errors=errors
        )
        self.details['violations'] = [v.to_violation() for v in self.violations]


class ImmutableFieldError(DomainException):
    """Raised when an update tries to change a field that is fixed after creation."""

    def __init__(self, field: str, current: Any, attempted: Any):
        self.field = field
        super().__init__(
            message=f"Site {field} cannot be changed",
            code='IMMUTABLE_FIELD',
            details={
                'field': field,
                'current': str(current),
                'attempted': str(attempted)
            }
        )


class DuplicateIdError(DomainException):
    """Raised when attempting to create an entity whose id already exists."""

    def __init__(self, entity_type: str, entity_id: Any):
        self.entity_id = entity_id
        super().__init__(
            message=f"{entity_type} with this ID already exists",
            code='DUPLICATE_ID',
            details={
                'entity_type': entity_type,
                'entity_id': str(entity_id)
            }
        )


class DuplicateUserError(DomainException):
    """Raised when registering a username that is already taken."""

    def __init__(self, username: str):
        super().__init__(
            message="User already exists",
            code='DUPLICATE_USER',
            details={'username': username}
        )


class WeakPasswordError(DomainException):
    """Raised when a password does not satisfy the password policy."""

    def __init__(self, problems: Sequence[str]):
        self.problems = list(problems)
        super().__init__(
            message=', '.join(self.problems),
            code='WEAK_PASSWORD',
            details={'problems': self.problems}
        )


class InvalidCredentialsError(DomainException):
    """
    Raised when login fails.

    The message is identical whether the username or the password was wrong.
    """

    def __init__(self):
        super().__init__(message="Invalid credentials", code='INVALID_CREDENTIALS')


class InvalidTokenError(DomainException):
    """Raised when a bearer token is missing, malformed, expired or orphaned."""

    def __init__(self, message: str = "Token is not valid"):
        super().__init__(message=message, code='INVALID_TOKEN')


class AuthorizationException(DomainException):
    """Raised when user lacks permission for an operation."""

    def __init__(
        self,
        message: str = "Not authorized to perform this action",
        required_role: Optional[str] = None
    ):
        details = {}
        if required_role:
            details['required_role'] = required_role
        super().__init__(
            message=message,
            code='NOT_AUTHORIZED',
            details=details
        )
