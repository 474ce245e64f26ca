"""
Custom Exceptions Module
Defines the exceptions raised by the service at startup and while handling requests
"""
from typing import Any, Dict, Optional


class HarnessDemoException(Exception):
    """Base exception for the harness demo service"""
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(HarnessDemoException):
    """Raised when the service cannot start with the given configuration"""
    def __init__(self, message: str = "Configuration error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details)


class NotFoundError(HarnessDemoException):
    """Raised when a requested resource does not exist"""
    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=404, details=details)
