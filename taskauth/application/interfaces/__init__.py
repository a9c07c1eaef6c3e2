"""Application ports (Protocols) implemented by infrastructure."""

from taskauth.application.interfaces.repositories import IUserRepository
from taskauth.application.interfaces.services import (
    IEmailSender,
    IOtpGenerator,
    IPasswordHasher,
    ISessionStore,
    ITokenService,
)

__all__ = [
    "IEmailSender",
    "IOtpGenerator",
    "IPasswordHasher",
    "ISessionStore",
    "ITokenService",
    "IUserRepository",
]
