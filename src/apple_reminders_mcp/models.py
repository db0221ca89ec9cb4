"""Pydantic models for Reminders MCP server."""

from collections.abc import Mapping
from datetime import date, datetime
from enum import IntEnum
from typing import Any, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .constants import (
    MAX_BODY_LENGTH,
    MAX_LIST_NAME_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PAGINATION_LIMIT,
    MAX_QUERY_LENGTH,
)
from .exceptions import ValidationError
from .utils import is_date_only, local_midnight, parse_all_day_input, parse_due_input

M = TypeVar("M", bound=BaseModel)


class Priority(IntEnum):
    """Reminder priority levels on the 0-9 scale used by this server.

    - NONE (0): No priority
    - LOW (1-4): ! in UI
    - MEDIUM (5-8): !! in UI
    - HIGH (9): !!! in UI
    """

    NONE = 0
    LOW = 1
    MEDIUM = 5
    HIGH = 9


def priority_level(value: int) -> str:
    """Name the band a 0-9 priority falls into."""
    if value <= Priority.NONE:
        return "none"
    if value >= Priority.HIGH:
        return "high"
    if value >= Priority.MEDIUM:
        return "medium"
    return "low"


class ReminderList(BaseModel):
    """A Reminders list (calendar in EventKit terms)."""

    id: str = Field(description="Unique identifier for the list")
    name: str = Field(description="Display name of the list")


class Reminder(BaseModel):
    """A reminder item."""

    id: str = Field(description="Unique identifier for the reminder")
    name: str = Field(description="Title/name of the reminder")
    body: str | None = Field(default=None, description="Additional notes")
    completed: bool = Field(default=False, description="Whether the reminder is done")
    completion_date: datetime | None = Field(
        default=None, description="When the reminder was completed"
    )
    due_date: datetime | None = Field(
        default=None, description="Due date with a time of day (UTC)"
    )
    all_day_due_date: date | None = Field(
        default=None, description="Due date without a time of day"
    )
    remind_me_date: datetime | None = Field(
        default=None, description="Earliest notification time (UTC)"
    )
    priority: int = Field(
        default=Priority.NONE,
        ge=0,
        le=9,
        description="Priority level (0=none, 1-4=low, 5-8=medium, 9=high)",
    )
    creation_date: datetime = Field(description="When the reminder was created")
    modification_date: datetime = Field(
        description="When the reminder was last modified"
    )
    list_name: str = Field(description="Name of the list containing this reminder")

    # False when modification_date is a stand-in for a date the store omitted
    _modification_known: bool = PrivateAttr(default=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_all_day(self) -> bool:
        """Whether the due date carries no time of day."""
        return self.all_day_due_date is not None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def priority_level(self) -> str:
        """Priority band: none, low, medium or high."""
        return priority_level(self.priority)

    @property
    def due_timestamp(self) -> datetime | None:
        """Instant used to order reminders by due date.

        An all-day due date counts from the start of that day in the local
        time zone.
        """
        if self.due_date is not None:
            return self.due_date
        if self.all_day_due_date is not None:
            return local_midnight(self.all_day_due_date)
        return None

    @property
    def modification_known(self) -> bool:
        """Whether the store reported a modification date."""
        return self._modification_known

    @property
    def recency_date(self) -> datetime:
        """Instant used to order reminders by recency.

        The last modification date, or the creation date when the store
        reported no modification date.
        """
        if self._modification_known:
            return self.modification_date
        return self.creation_date


class ReminderPage(BaseModel):
    """One page of reminders from a list or search request."""

    total: int = Field(description="Number of reminders matching the filters")
    count: int = Field(description="Number of reminders in this page")
    offset: int = Field(description="Number of matching reminders skipped")
    limit: int = Field(description="Maximum page size requested")
    has_more: bool = Field(description="Whether more reminders follow this page")
    next_offset: int | None = Field(
        default=None, description="Offset of the next page, if any"
    )
    query: str | None = Field(default=None, description="Search query, if any")
    reminders: list[Reminder] = Field(default_factory=list)


class CreatedReminder(BaseModel):
    """Result of creating a reminder."""

    id: str = Field(description="Identifier of the new reminder")
    name: str = Field(description="Name of the new reminder")
    list_name: str = Field(description="List the reminder was added to")


# Request models
#
# These travel to the gateway as camelCase JSON and are validated again
# there, so both sides of the process boundary share one schema.


class _Request(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class ReminderFilter(_Request):
    """List and completion filters shared by list, count and search."""

    list_name: str | None = Field(default=None, description="Exact list name")
    completed: bool | None = Field(
        default=None, description="Only completed (true) or incomplete (false)"
    )


class ListRemindersInput(ReminderFilter):
    """Input for listing reminders. A missing limit means all remaining."""

    limit: int | None = Field(default=None, ge=1, le=MAX_PAGINATION_LIMIT)
    offset: int = Field(default=0, ge=0)


class SearchRemindersInput(ListRemindersInput):
    """Input for searching reminders by name."""

    query: str = Field(min_length=1, max_length=MAX_QUERY_LENGTH)
    has_due_date: bool | None = Field(default=None)


class ReminderFields(_Request):
    """Optional reminder fields shared by create and update."""

    body: str | None = Field(default=None, max_length=MAX_BODY_LENGTH)
    due_date: datetime | None = None
    all_day_due_date: date | None = None
    remind_me_date: datetime | None = None
    priority: int | None = Field(default=None, ge=0, le=9)

    @model_validator(mode="before")
    @classmethod
    def _date_only_due_is_all_day(cls, data: Any) -> Any:
        # "YYYY-MM-DD" given as a timed due date denotes the all-day form
        if not isinstance(data, dict):
            return data
        key = "dueDate" if "dueDate" in data else "due_date"
        value = data.get(key)
        if not is_date_only(value):
            return data

        data = dict(data)
        del data[key]
        if data.get("allDayDueDate") is None and data.get("all_day_due_date") is None:
            data.pop("allDayDueDate", None)
            data["all_day_due_date"] = value
        return data

    @field_validator("due_date", "remind_me_date", mode="before")
    @classmethod
    def _parse_timed(cls, v: Any) -> datetime | None:
        return None if v is None else parse_due_input(v)

    @field_validator("all_day_due_date", mode="before")
    @classmethod
    def _parse_all_day(cls, v: Any) -> date | None:
        return None if v is None else parse_all_day_input(v)


class CreateReminderInput(ReminderFields):
    """Input for creating a reminder."""

    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    list_name: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Reminder name cannot be empty")
        return v


class UpdateReminderInput(ReminderFields):
    """Input for updating a reminder located by list and name."""

    list_name: str = Field(min_length=1)
    reminder_name: str = Field(min_length=1)
    new_name: str | None = Field(default=None, max_length=MAX_NAME_LENGTH)
    completed: bool | None = None

    @field_validator("new_name")
    @classmethod
    def _new_name_not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Reminder name cannot be empty")
        return v

    def has_changes(self) -> bool:
        """Whether any field besides the lookup key is set."""
        return any(
            getattr(self, field) is not None
            for field in (
                "new_name",
                "body",
                "due_date",
                "all_day_due_date",
                "remind_me_date",
                "priority",
                "completed",
            )
        )


class DeleteReminderInput(_Request):
    """Input for deleting a reminder located by list and name."""

    list_name: str = Field(min_length=1)
    reminder_name: str = Field(min_length=1)


class CreateListInput(_Request):
    """Input for creating a list."""

    name: str = Field(min_length=1, max_length=MAX_LIST_NAME_LENGTH)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("List name cannot be empty")
        return v


class DeleteListInput(_Request):
    """Input for deleting a list."""

    name: str = Field(min_length=1)


def validate_input(model: type[M], data: Mapping[str, Any] | str) -> M:
    """Validate a request, raising ValidationError with pydantic's messages.

    Args:
        model: Request model class
        data: Mapping of field values, or a JSON document

    Returns:
        The validated model instance
    """
    try:
        if isinstance(data, str):
            return model.model_validate_json(data)
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(_describe(e)) from e


def _describe(error: PydanticValidationError) -> str:
    parts = []
    for detail in error.errors():
        message = detail["msg"].removeprefix("Value error, ")
        location = ".".join(str(part) for part in detail["loc"])
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
