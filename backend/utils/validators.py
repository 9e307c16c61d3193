"""
Input validation utilities
"""
from datetime import date
from typing import Any, Optional

from backend.errors import ValidationError
from backend.models.leaf_collection import LeafType


def validate_reg_no(value: Any) -> int:
    """Registration numbers must be positive integers (strings of digits accepted)"""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Registration number is required")
    if isinstance(value, bool):
        raise ValidationError("Registration number must be numeric")
    try:
        reg_no = int(str(value).strip())
    except ValueError:
        raise ValidationError("Registration number must be numeric", detail=str(value))
    if reg_no <= 0:
        raise ValidationError("Registration number must be a positive integer", detail=str(value))
    return reg_no


def validate_leaf_type(value: Optional[str]) -> LeafType:
    """Validate leaf type is one of Normal / Super"""
    try:
        return LeafType(str(value).strip())
    except ValueError:
        raise ValidationError('Invalid leaf type. Must be "Normal" or "Super"', detail=str(value))


def validate_required_text(value: Any, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


def parse_iso_date(value: str, field: str = "date") -> date:
    """Parse YYYY-MM-DD (a trailing time part is ignored)"""
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise ValidationError(f"Invalid {field}. Expected YYYY-MM-DD", detail=str(value))

