"""Base exception classes for bitperm"""

from typing import Any, Dict, List, Optional

class BitpermError(Exception):
    """Base exception for all bitperm errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

class InvalidMaskError(BitpermError):
    """Raised when a permission mask cannot be parsed or rendered"""

    def __init__(self, value: Any, reason: str = "not a non-negative decimal integer"):
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid permission mask {value!r}: {reason}",
            {
                "value": repr(value),
                "reason": reason
            }
        )

class RegistryError(BitpermError):
    """Raised when a permission registry definition is inconsistent"""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(
            f"Invalid permission registry: {'; '.join(errors)}",
            {"errors": errors}
        )

class ConfigurationError(BitpermError):
    """Raised when configuration is invalid"""
    pass

class PermissionNotFoundError(BitpermError):
    """Raised by strict lookups when a permission name is not registered"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Permission not found: {name}",
            {"permission": name}
        )

class AuthorizationError(BitpermError):
    """Raised when an actor is not allowed to perform an action"""

    def __init__(self, message: str = "Access denied", cause: Optional[str] = None):
        self.cause = cause
        super().__init__(message, {"cause": cause} if cause else None)
