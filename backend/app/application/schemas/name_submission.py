"""Pydantic DTOs (Data Transfer Objects) for submitting a new name."""

from pydantic import BaseModel, Field

from app.domain.entities import Gender


class NameSubmission(BaseModel):
    """Raw form input for a new name.

    Lengths are not constrained here: they are checked after normalization
    so that each failure maps to its own submit error.
    """

    country_id: str | None = Field(None, examples=["b6f1c1e0-mx"])
    name: str = Field("", examples=["  ana   maria  "])
    description: str = Field("", examples=["VIVE EN MONTERREY"])
    gender: Gender = Gender.MALE


class SubmitOutcome(BaseModel):
    """Result of a submit as seen by the view: ok flag plus the message to show."""

    ok: bool
    message: str
    record_id: str | None = None
    country_id: str | None = None
    error_type: str | None = None
