"""
Custom exception hierarchy for the training dojo.

All application exceptions inherit from DojoError.
"""


class DojoError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(DojoError):
    """Invalid or missing configuration."""

    pass


# =============================================================================
# Oracle Errors
# =============================================================================


class OracleFailure(DojoError):
    """Teacher oracle could not produce a reply.

    Raised for every transport or provider error. The session controller
    treats all subclasses identically.
    """

    pass


class OracleTimeoutError(OracleFailure):
    """Oracle call timed out."""

    pass


class OracleRateLimitError(OracleFailure):
    """Oracle provider rate limit exceeded."""

    pass


# =============================================================================
# Persistence Errors
# =============================================================================


class PersistenceError(DojoError):
    """Base for storage errors."""

    pass


class LeaderboardCorruptionError(PersistenceError):
    """Stored leaderboard could not be decoded."""

    pass


# =============================================================================
# Session Errors
# =============================================================================


class SessionError(DojoError):
    """Session-related error."""

    pass


class NotLoggedInError(SessionError):
    """Command issued before login."""

    pass


class AlreadyLoggedInError(SessionError):
    """Login attempted while an identifier is already bound."""

    pass


class SessionBusyError(SessionError):
    """Oracle-dependent command issued while a request is outstanding."""

    pass


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DojoError):
    """Input validation failed."""

    pass


class InvalidIdentifierError(ValidationError):
    """Login identifier is empty after trimming."""

    pass
