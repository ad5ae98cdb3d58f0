"""Pydantic schemas for the background checklist."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DocumentResponse(BaseModel):
    id: str
    title: str
    description: str
    category: str
    required: bool
    time_to_obtain: str
    cost: str
    checked: bool = False


class ChecklistResponse(BaseModel):
    documents: list[DocumentResponse]
    checked: list[str]
    required_total: int
    required_completed: int
    total: int
    completed: int
    unlocked: bool
    points_needed: int


class ToggleDocumentRequest(BaseModel):
    checked: bool = True


class ImportChecklistRequest(BaseModel):
    """Contents of the browser `background-checklist-progress` storage key."""

    document_ids: list[str] = Field(default_factory=list, max_length=100)


class ChecklistUpdateResponse(BaseModel):
    checked: list[str]
    points_awarded: int
    badges_awarded: list[str]
