"""Pydantic models for the dashboard HTTP API."""

from pydantic import BaseModel, Field


class ManualSubmitRequest(BaseModel):
    """Manual override submitted from a meal card."""

    period: str
    device: str
    value: int | str | None = Field(default=None, union_mode="left_to_right")


class ManualSubmitResponse(BaseModel):
    """Result of a manual override submission."""

    ok: bool
    status: str
    message: str
