"""
Domain exceptions for navguard.

All application errors inherit from NavguardError. The sanitizer itself never
lets one of these escape: parse and transform failures are resolved through
the fail-safe policy.
"""


class NavguardError(Exception):
    """Base class for all navguard exceptions."""

    def __init__(self, message: str, context: dict = None):
        super().__init__(message)
        self.context = context or {}


class SanitizationError(NavguardError):
    """Raised when the sanitization transform cannot complete on a parsed tree."""

    pass


class ConfigurationError(NavguardError):
    """Raised when configuration is invalid or corrupt."""

    pass


class InvalidRequestError(NavguardError):
    """Raised when an inbound sanitize request is malformed."""

    pass
