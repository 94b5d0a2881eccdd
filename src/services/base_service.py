"""
Base service layer - result type shared by all service operations
"""

from typing import Any, Optional
from dataclasses import dataclass

# Error types carried by a failed ServiceResult
RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
CONFLICT = "CONFLICT"
DATABASE_ERROR = "DATABASE_ERROR"

@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[Any] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None

    @classmethod
    def ok(cls, data: Any, count: int = 1) -> "ServiceResult":
        return cls(success=True, data=data, count=count)

    @classmethod
    def fail(cls, error_type: str, error: str) -> "ServiceResult":
        return cls(success=False, error=error, error_type=error_type)
