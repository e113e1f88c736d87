"""
Error taxonomy for the tier state engine.

None of these are fatal: decode and storage failures degrade to a default
board or an empty custom-item store at the engine boundary.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Error categories for classification"""
    DECODE = "decode"  # Malformed or non-invertible state token
    STORAGE_UNAVAILABLE = "storage_unavailable"  # No local store in this context
    STORAGE_CORRUPT = "storage_corrupt"  # Stored custom items failed to parse
    VALIDATION = "validation"  # Unknown template, bad input


class TierStateError(Exception):
    """Base error with classification"""

    category: ErrorCategory = ErrorCategory.VALIDATION

    def __init__(self, message: str, metadata: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "message": self.message,
            "error_type": type(self).__name__,
            "category": self.category.value,
            "metadata": self.metadata,
        }


class DecodeFailure(TierStateError):
    category = ErrorCategory.DECODE


class StorageUnavailable(TierStateError):
    category = ErrorCategory.STORAGE_UNAVAILABLE


class StorageCorrupt(TierStateError):
    category = ErrorCategory.STORAGE_CORRUPT


class UnknownTemplateError(TierStateError):
    category = ErrorCategory.VALIDATION

    def __init__(self, name: str):
        super().__init__(f"Unknown tier template: {name}", {"template": name})
        self.name = name


class UnknownPackageError(TierStateError):
    category = ErrorCategory.VALIDATION

    def __init__(self, name: str):
        super().__init__(f"Unknown catalog package: {name}", {"package": name})
        self.name = name
