"""Authentication and access restriction primitives."""

from .business_days import BusinessDayGate, OutsideBusinessHoursError, is_business_day
from .credentials import CredentialVerifier, Identity, StaticCredentialStore
from .tokens import InvalidTokenError, MissingTokenError, TokenError, TokenService

__all__ = [
    "BusinessDayGate",
    "CredentialVerifier",
    "Identity",
    "InvalidTokenError",
    "MissingTokenError",
    "OutsideBusinessHoursError",
    "StaticCredentialStore",
    "TokenError",
    "TokenService",
    "is_business_day",
]
