"""
Schedule item schemas.

API payloads use camelCase names (projectId, plannedStart, ...); the
schedule_items table uses the snake_case field names.

Table: schedule_items
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from buildtrack.utils.dates import to_iso_string


def _normalize_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_iso_string(value)
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ParsedCandidate(BaseModel):
    """
    Schedule item produced by an import, not yet persisted.

    No id and no delay: actual dates are unknown at parse time.
    """
    model_config = ConfigDict(populate_by_name=True)

    project_id: str = Field(alias="projectId", min_length=1, description="Owning project id")
    task: str = Field(min_length=1, description="Display name of the work item")
    planned_start: str = Field(alias="plannedStart", description="Planned start (ISO 8601)")
    planned_end: str = Field(alias="plannedEnd", description="Planned end (ISO 8601)")
    actual_start: Optional[str] = Field(default=None, alias="actualStart", description="Actual start (ISO 8601)")
    actual_end: Optional[str] = Field(default=None, alias="actualEnd", description="Actual end (ISO 8601)")
    description: Optional[str] = Field(default=None, description="Free text notes")

    @field_validator("planned_start", "planned_end", "actual_start", "actual_end", mode="before")
    @classmethod
    def _dates_to_iso(cls, value: Any) -> Any:
        return _normalize_date(value)

    def to_api_dict(self) -> Dict[str, Any]:
        """camelCase payload without unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ScheduleItem(ParsedCandidate):
    """
    Persisted schedule item.

    delay_days is derived from the planned and actual windows and is
    never authored directly.
    """
    id: Optional[str] = Field(default=None, description="Assigned by persistence on create")
    delay_days: int = Field(default=0, ge=0, alias="delayDays", description="Days actual end trails planned end")
    status: Optional[str] = Field(default=None, description="Workflow status")
    responsible_party: Optional[str] = Field(default=None, alias="responsibleParty", description="Party responsible")
    owner_comment: Optional[str] = Field(default=None, alias="ownerComment", description="Owner comment")
    created_at: Optional[str] = Field(default=None, alias="createdAt", description="Creation timestamp")

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> Any:
        return None if value is None else str(value)

    def to_row(self) -> Dict[str, Any]:
        """snake_case row for the schedule_items table (id and created_at omitted)."""
        return self.model_dump(by_alias=False, exclude={"id", "created_at"})

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ScheduleItem":
        """Build from a schedule_items table row."""
        data = dict(row)
        if data.get("delay_days") is None:
            data["delay_days"] = 0
        return cls.model_validate(data)


class ParseRequest(BaseModel):
    """Body of a parse-schedule-file invocation."""
    model_config = ConfigDict(populate_by_name=True)

    file_url: str = Field(alias="fileUrl", min_length=1)
    project_id: str = Field(alias="projectId", min_length=1)
    file_type: str = Field(alias="fileType", min_length=1)


class ImportResult(BaseModel):
    """
    Outcome of one import attempt.

    Either items (possibly synthesized) or an error message. PDF failures
    may also carry mock_items the reviewer can accept instead.
    """
    items: List[ParsedCandidate] = Field(default_factory=list)
    error: Optional[str] = None
    details: Optional[str] = None
    mock_items: List[ParsedCandidate] = Field(default_factory=list)
    file_url: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_response(self) -> Dict[str, Any]:
        """Response body in the parse-invocation wire shape."""
        if self.error is not None:
            body: Dict[str, Any] = {"error": self.error}
            if self.details:
                body["details"] = self.details
            if self.mock_items:
                body["mockItems"] = [item.to_api_dict() for item in self.mock_items]
            return body
        body = {"items": [item.to_api_dict() for item in self.items]}
        if self.message:
            body["message"] = self.message
        return body
