"""
Authentication error taxonomy.

Each error carries a machine-readable code and the HTTP status it maps to,
so the API layer can render it without a lookup table of its own.
"""
from __future__ import annotations


class AuthError(Exception):
    code = "AUTH_ERROR"
    status = 400
    message = "Authentication error"

    def __init__(self, message: str | None = None, details: dict | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details


class AccountExists(AuthError):
    code = "ACCOUNT_EXISTS"
    status = 409
    message = "Username already exists"


class AccountNotFound(AuthError):
    code = "ACCOUNT_NOT_FOUND"
    status = 404
    message = "User not found"


class InvalidCredentials(AuthError):
    code = "INVALID_CREDENTIALS"
    status = 401
    message = "Invalid username or password"


class MissingCredential(AuthError):
    code = "MISSING_CREDENTIAL"
    status = 401
    message = "No credential presented"


class InvalidSignature(AuthError):
    code = "INVALID_SIGNATURE"
    status = 403
    message = "Invalid token"


class CredentialMismatch(AuthError):
    code = "CREDENTIAL_MISMATCH"
    status = 403
    message = "Refresh token is not current"


class StorageFailure(AuthError):
    code = "STORAGE_FAILURE"
    status = 500
    message = "Storage operation failed"
