# Domain Exceptions
from .domain_exceptions import (
    AuthorizationException,
    DomainException,
    DuplicateIdError,
    DuplicateUserError,
    FieldViolation,
    ImmutableFieldError,
    InvalidCredentialsError,
    InvalidEnumError,
    InvalidNumberError,
    InvalidTextError,
    InvalidTokenError,
    MissingFieldError,
    NotFoundError,
    ShapeError,
    SiteValidationError,
    ValidationException,
    WeakPasswordError,
)

__all__ = [
    'AuthorizationException',
    'DomainException',
    'DuplicateIdError',
    'DuplicateUserError',
    'FieldViolation',
    'ImmutableFieldError',
    'InvalidCredentialsError',
    'InvalidEnumError',
    'InvalidNumberError',
    'InvalidTextError',
    'InvalidTokenError',
    'MissingFieldError',
    'NotFoundError',
    'ShapeError',
    'SiteValidationError',
    'ValidationException',
    'WeakPasswordError',
]
