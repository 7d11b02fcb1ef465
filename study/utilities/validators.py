"""
Input validation schemas using Pydantic for the JSON API.
"""
from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator
from typing import Optional

from study.utilities.constants import ISO_DATE_PATTERN


class _CamelInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PlanCreateInput(_CamelInput):
    """Schema for creating an empty plan."""
    exam_name: str = Field(..., alias="examName", min_length=1, max_length=200)
    month: str = Field(..., min_length=1, max_length=100)

    @model_validator(mode="before")
    @classmethod
    def reject_owner_fields(cls, data):
        """The owner always comes from the session, never from the body."""
        if isinstance(data, dict) and ("userId" in data or "user_id" in data):
            raise ValueError("User ID cannot be provided in request body")
        return data

    @field_validator("exam_name", "month")
    @classmethod
    def strip_text(cls, v):
        if not v.strip():
            raise ValueError("must be a non-empty string")
        return v.strip()


class PlanUpdateInput(_CamelInput):
    """Schema for renaming a plan; omitted fields are left unchanged."""
    exam_name: Optional[str] = Field(None, alias="examName", max_length=200)
    month: Optional[str] = Field(None, max_length=100)

    @field_validator("exam_name", "month")
    @classmethod
    def strip_text(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError("must be a non-empty string")
        return v.strip()


class PlanUploadInput(BaseModel):
    """Raw plan document as pasted or read from a file by the client."""
    content: str = Field(..., min_length=1)


class TaskInput(_CamelInput):
    """Schema for adding a daily task to a plan."""
    name: str = Field(..., min_length=1, max_length=300)
    date: str = Field(..., pattern=ISO_DATE_PATTERN)
    weekly_goal_id: Optional[int] = Field(None, alias="weeklyGoalId", ge=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Task name cannot be empty")
        return v.strip()


class WeeklyGoalInput(_CamelInput):
    """Schema for adding a weekly goal."""
    week_number: int = Field(..., alias="weekNumber", ge=1)
    goal: str = Field(..., min_length=1, max_length=300)

    @field_validator("goal")
    @classmethod
    def validate_goal(cls, v):
        if not v.strip():
            raise ValueError("Goal cannot be empty")
        return v.strip()


class MonthlyGoalInput(BaseModel):
    """Schema for adding a monthly goal."""
    goal: str = Field(..., min_length=1, max_length=300)

    @field_validator("goal")
    @classmethod
    def validate_goal(cls, v):
        if not v.strip():
            raise ValueError("Goal cannot be empty")
        return v.strip()


class CompletionInput(BaseModel):
    """Completion toggle; only a real JSON boolean is accepted."""
    completed: StrictBool
