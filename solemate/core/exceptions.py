"""
Custom exception classes
Provides consistent error responses across the application
"""

from fastapi import HTTPException, status
from typing import Any, Dict, Optional

class SoleMateException(HTTPException):
    """Base exception class for SoleMate application"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

class BadRequestException(SoleMateException):
    """400 Bad Request"""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )

class UnauthorizedException(SoleMateException):
    """401 Unauthorized"""

    def __init__(self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"}
        )

class NotFoundException(SoleMateException):
    """404 Not Found

    Also raised when a row exists but belongs to another owner, so callers
    cannot discover other shoppers' rows.
    """

    def __init__(self, detail: str = "Not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code
        )

class ConflictException(SoleMateException):
    """409 Conflict"""

    def __init__(self, detail: str, error_code: str = "CONFLICT"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code
        )

class ServiceUnavailableException(SoleMateException):
    """503 Service Unavailable"""

    def __init__(
        self,
        detail: str = "Service temporarily unavailable",
        error_code: str = "SERVICE_UNAVAILABLE"
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            error_code=error_code
        )

# Business logic exceptions
class InvalidQuantityException(BadRequestException):
    """Quantity must be a positive integer"""

    def __init__(self, quantity: int):
        super().__init__(
            detail=f"Quantity must be greater than 0, got {quantity}",
            error_code="INVALID_QUANTITY"
        )

class VariantUnavailableException(BadRequestException):
    """Variant exists but cannot be added to a cart"""

    def __init__(self, detail: str = "Variant is not available"):
        super().__init__(
            detail=detail,
            error_code="VARIANT_UNAVAILABLE"
        )

class StoreUnavailableException(ServiceUnavailableException):
    """Durable store failed; idempotent operations may be retried"""

    def __init__(self, detail: str = "Storage temporarily unavailable, please retry"):
        super().__init__(
            detail=detail,
            error_code="STORE_UNAVAILABLE"
        )

class DuplicateResourceException(ConflictException):
    """Resource already exists"""

    def __init__(self, resource: str, field: str, value: str):
        super().__init__(
            detail=f"{resource} with {field} '{value}' already exists",
            error_code="DUPLICATE_RESOURCE"
        )

class InsufficientStockException(BadRequestException):
    """Requested quantity exceeds the variant's stock"""

    def __init__(self, available: int):
        super().__init__(
            detail=f"Insufficient inventory. Only {available} available.",
            error_code="INSUFFICIENT_INVENTORY"
        )
