# resumatch/core/errors.py
from __future__ import annotations


class ResumatchError(Exception):
    """Base class for errors the API maps to user-facing responses."""


class ModelUnavailableError(ResumatchError):
    pass


class AnalysisError(ResumatchError):
    pass


class UnsupportedDocumentError(AnalysisError):
    pass


class AuthError(ResumatchError):
    pass


class InvalidCredentialsError(AuthError):
    def __init__(self, message: str = "Invalid email or password."):
        super().__init__(message)


class EmailAlreadyRegisteredError(AuthError):
    def __init__(self, message: str = "Email is already registered"):
        super().__init__(message)


class NotFoundError(ResumatchError):
    pass


class ForbiddenError(ResumatchError):
    pass


class QuotaExceededError(ResumatchError):
    pass
