"""
Core data models for Launchpad.

Records use storage (snake_case) field naming; the presentation adapter
owns the mapping to client naming.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from launchpad.core.exceptions import ValidationError


class AppStatus(Enum):
    """Availability of an application tile."""

    ACTIVE = "ACTIVE"
    MAINTENANCE = "MAINTENANCE"
    DISABLED = "DISABLED"


class AppType(Enum):
    """How a tile is launched; decides how ``url`` is interpreted."""

    URL = "URL"
    EXECUTABLE_REFERENCE = "EXE"
    INTERNAL_VIEW = "INTERNAL_VIEW"


DEFAULT_ICON = "Box"

# Free-text columns, stored as-is.
TEXT_FIELDS = (
    "url",
    "swarm_url",
    "owner",
    "source_url",
    "backend_port",
    "ai_model",
)


class AppRecord(BaseModel):
    """One entry in the application registry."""

    id: str
    name: str
    description: str = ""
    icon_name: str = DEFAULT_ICON
    status: AppStatus = AppStatus.ACTIVE
    type: AppType = AppType.URL
    url: str | None = None
    swarm_url: str | None = None
    owner: str | None = None
    source_url: str | None = None
    backend_port: str | None = None
    ai_model: str | None = None
    sort_order: int = Field(default=0, description="Display position; only relative order matters")

    model_config = {"extra": "forbid"}

    @field_validator("id", "name")
    @classmethod
    def validate_required(cls, v: str) -> str:
        """Reject empty or whitespace-only identity fields."""
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("description", "icon_name", mode="before")
    @classmethod
    def coerce_null_text(cls, v: Any, info: ValidationInfo) -> Any:
        """Treat null display text as the field default."""
        if v is None:
            return DEFAULT_ICON if info.field_name == "icon_name" else ""
        return v

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        """Ports and similar metadata may arrive as numbers."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def launch_target(self) -> str | None:
        """Address the tile opens, per its type."""
        if self.type == AppType.INTERNAL_VIEW:
            return None
        return self.url

    def to_row(self) -> dict[str, Any]:
        """Serialize to the stored row shape (enum values as strings)."""
        return self.model_dump(mode="json")

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "AppRecord":
        """Build a record from a stored row or a mapped client payload."""
        return validate_record(row)


def validate_record(data: dict[str, Any]) -> AppRecord:
    """
    Validate a storage-named mapping into an AppRecord.

    Raises:
        ValidationError: If required fields are missing or values are invalid
    """
    try:
        return AppRecord.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
            for err in e.errors()
        ]
        first_field = str(e.errors()[0]["loc"][0]) if e.errors() and e.errors()[0]["loc"] else None
        raise ValidationError(
            "Invalid application record",
            field=first_field,
            validation_errors=errors,
        ) from e
