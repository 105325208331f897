"""
Exporter Exceptions - Custom exceptions for configuration and fetch errors.
"""
from typing import Any, Dict, Optional


class ExporterException(Exception):
    """
    Base exception for all exporter errors.

    Carries a machine-readable code and optional details so callers
    can log or serialize the error consistently.
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


class ConfigurationError(ExporterException):
    """
    Raised when the exporter cannot run with the current configuration.

    Not transient: retrying without operator intervention won't help.
    """

    def __init__(
        self,
        message: str,
        setting: Optional[str] = None
    ):
        self.setting = setting
        super().__init__(
            message=message,
            code='CONFIGURATION_ERROR',
            details={'setting': setting} if setting else {}
        )


class FetchError(ExporterException):
    """
    Raised when one upstream fetch fails.

    The reason is one of ``transport``, ``status`` or ``decode`` and is
    only meant for logging; callers treat all of them the same way.
    """

    TRANSPORT = 'transport'
    STATUS = 'status'
    DECODE = 'decode'

    def __init__(
        self,
        message: str,
        reason: str,
        status_code: Optional[int] = None
    ):
        self.reason = reason
        self.status_code = status_code
        details: Dict[str, Any] = {'reason': reason}
        if status_code is not None:
            details['status_code'] = status_code
        super().__init__(
            message=message,
            code='FETCH_FAILED',
            details=details
        )
