from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import ConflictType


class RightError(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    metadata_id: str
    right_id_source: str
    conflicting_right_id: str
    conflict_type: ConflictType
    message: str


class TemplateApplication(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    right_id: str
    metadata_ids: list[str]
    number_of_applied_entries: int
    errors: list[RightError]


class TemplateApplicationsRequest(BaseModel):
    right_ids: list[str] = []


class TemplateApplications(BaseModel):
    applications: list[TemplateApplication]


class TemplateBookmarks(BaseModel):
    bookmark_ids: list[int] = Field(..., min_length=1)


class TemplateBookmarksAdded(BaseModel):
    right_id: str
    bookmark_ids: list[int]
