from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from core.errors import StoreError
from models.enums import Role

M = TypeVar("M", bound=BaseModel)


# -------------------------------------------------
# Joined profile (PostgREST embedded select)
# -------------------------------------------------
class ProfileSummary(BaseModel):
    id: str
    full_name: Optional[str] = None
    flat_number: Optional[str] = None
    role: Optional[Role] = None


def normalize_timestamp(v):
    """Normalize timestamps like "2025-01-01T00:00:00Z"."""
    if isinstance(v, str) and v.endswith("Z"):
        return v.replace("Z", "+00:00")
    return v


def validate_row(model_cls: Type[M], row: Dict[str, Any], **extra) -> M:
    """
    Validate a raw store row into its read model.
    A row that does not fit (unknown status, missing column) is a
    backend fault, so it surfaces as StoreError.
    """
    try:
        return model_cls.model_validate({**row, **extra})
    except PydanticValidationError as e:
        raise StoreError(
            f"Malformed {model_cls.__name__} row {row.get('id')}: {e.error_count()} invalid field(s)"
        )
