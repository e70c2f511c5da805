"""Base model classes for the Career Coach system."""

from datetime import datetime
from typing import Any, List, Optional
from uuid import uuid4

from pydantic import BaseModel as PydanticBaseModel, Field


class BaseModel(PydanticBaseModel):
    """Base model with common functionality."""

    class Config:
        """Pydantic configuration."""
        use_enum_values = False
        validate_assignment = True
        # LLM payloads arrive camelCased, callers use snake_case
        populate_by_name = True

    def to_payload(self) -> dict:
        """Serialize with camelCase aliases, the shape returned to API callers."""
        return self.model_dump(mode="json", by_alias=True)


class IdentifiableModel(BaseModel):
    """Base model with ID field."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Unique identifier")


class TimestampedModel(BaseModel):
    """Base model with timestamp fields."""

    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")

    def update_timestamp(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now()


def clean_string_list(value: Any) -> List[str]:
    """Coerce loosely-typed model output into a list of non-empty strings."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    cleaned = []
    for item in value:
        if item is None:
            continue
        text = item if isinstance(item, str) else str(item)
        text = text.strip()
        if text:
            cleaned.append(text)
    return cleaned


def clean_text(value: Any) -> str:
    """Coerce a possibly missing or non-string value into a string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple)):
        return " ".join(clean_string_list(value))
    return str(value)
