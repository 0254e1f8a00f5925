"""Base exceptions for workspace-authz.

All exceptions inherit from WorkspaceAuthzError and carry an error code and
structured details so the API boundary can render them without inspecting
the message text.
"""

from typing import Any, Dict, Optional


class WorkspaceAuthzError(Exception):
    """Base exception for all workspace-authz errors."""
    
    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class ConfigurationError(WorkspaceAuthzError):
    """Raised when settings or adapter wiring is invalid."""
    pass


def create_error_response(exception: WorkspaceAuthzError) -> Dict[str, Any]:
    """Create standardized error response from exception.
    
    Args:
        exception: The workspace-authz exception
        
    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
