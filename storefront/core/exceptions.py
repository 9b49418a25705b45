"""
Storefront Exception Hierarchy

Structured exception classes for the content and catalog subsystems.
All exceptions include code, message, and details for the audit trail
and for translation into API responses.

Exception Hierarchy:
    StorefrontError
    ├── ValidationError
    │   └── InvalidSectionTypeError
    ├── NotFoundError
    └── CatalogIntegrityError
        └── AmbiguousVariantError
"""
import logging
from typing import Optional, Dict, Any, List

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    """
    Base exception for all storefront custom errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging/audit
        severity: P0-P3 severity level
    """

    default_code: str = "STOREFRONT_ERROR"
    default_severity: str = "P2"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[str] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        self.severity = severity or self.default_severity
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "severity": self.severity,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# =============================================================================
# INPUT ERRORS
# =============================================================================

class ValidationError(StorefrontError):
    """Malformed input to a write operation. Never partially applied."""
    default_code = "VALIDATION_FAILED"
    default_severity = "P3"

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if field is not None:
            details["field"] = field
        super().__init__(message, details=details, **kwargs)


class InvalidSectionTypeError(ValidationError):
    """Section type outside the known taxonomy."""
    default_code = "INVALID_SECTION_TYPE"

    def __init__(self, section_type: Any, allowed: List[str], **kwargs):
        details = kwargs.pop("details", {})
        details.update({"section_type": section_type, "allowed": allowed})
        super().__init__(
            f"Invalid section type {section_type!r}. Allowed types: {', '.join(allowed)}",
            field="type",
            details=details,
            **kwargs,
        )


class NotFoundError(StorefrontError):
    """Operation targets a record that does not exist."""
    default_code = "NOT_FOUND"
    default_severity = "P3"

    def __init__(self, resource: str, resource_id: Any, **kwargs):
        details = kwargs.pop("details", {})
        details.update({"resource": resource, "id": resource_id})
        super().__init__(f"{resource} {resource_id} not found", details=details, **kwargs)


# =============================================================================
# CATALOG INTEGRITY ERRORS
# =============================================================================

class CatalogIntegrityError(StorefrontError):
    """Stored catalog data violates an invariant."""
    default_code = "CATALOG_INTEGRITY"
    default_severity = "P1"


class AmbiguousVariantError(CatalogIntegrityError):
    """More than one active variant matches a complete attribute selection."""
    default_code = "AMBIGUOUS_VARIANT"

    def __init__(
        self,
        selection: Dict[str, str],
        match_count: int,
        skus: Optional[List[Optional[str]]] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        details.update({
            "selection": dict(selection),
            "match_count": match_count,
            "skus": skus or [],
        })
        super().__init__(
            f"{match_count} active variants match selection {dict(selection)}",
            details=details,
            **kwargs,
        )
