"""Domain layer: entities, value objects, enums, results, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from taskauth.domain.entities import OtpChallenge, SessionRecord, UserEntity
from taskauth.domain.enums import ErrorKind, UserRole
from taskauth.domain.exceptions import (
    AppException,
    ConflictException,
    InvalidOtpException,
    InvalidTokenException,
    NotFoundException,
    OtpExpiredException,
    RepositoryException,
    StoreUnavailableException,
    UnauthorizedException,
    ValidationException,
    exception_for,
)
from taskauth.domain.result import Err, Ok, Result
from taskauth.domain.value_objects import EmailAddress

__all__ = [
    # Entities
    "OtpChallenge",
    "SessionRecord",
    "UserEntity",
    # Enums
    "ErrorKind",
    "UserRole",
    # Exceptions
    "AppException",
    "ConflictException",
    "InvalidOtpException",
    "InvalidTokenException",
    "NotFoundException",
    "OtpExpiredException",
    "RepositoryException",
    "StoreUnavailableException",
    "UnauthorizedException",
    "ValidationException",
    "exception_for",
    # Results
    "Err",
    "Ok",
    "Result",
    # Value objects
    "EmailAddress",
]
