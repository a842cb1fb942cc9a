from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.domain.enums import AccessState, BasisAccessState, BasisStorage


class RightBase(BaseModel):
    access_state: AccessState | None = None
    basis_access_state: BasisAccessState | None = None
    basis_storage: BasisStorage | None = None
    start_date: date
    end_date: date | None = None
    licence_contract: str | None = None
    author_right_exception: bool | None = None
    zbw_user_agreement: bool | None = None
    open_content_licence: str | None = None
    non_standard_open_content_licence: bool | None = None
    non_standard_open_content_licence_url: str | None = None
    restricted_open_content_licence: bool | None = None
    notes_general: str | None = None
    notes_formal_rules: str | None = None
    notes_process_documentation: str | None = None
    notes_management_related: str | None = None
    template_name: str | None = None
    template_description: str | None = None
    exception_from: str | None = None


class Right(RightBase):
    model_config = ConfigDict(from_attributes=True)

    right_id: str
    is_template: bool
    group_ids: list[str] = []
    last_applied_on: datetime | None = None
    created_on: datetime | None = None
    created_by: str | None = None
    last_updated_on: datetime | None = None
    last_updated_by: str | None = None


class RightCreate(RightBase):
    is_template: bool = False
    group_ids: list[str] = []
    created_by: str | None = None

    @model_validator(mode="after")
    def validate_end_date_after_start_date(self):
        """Ensure end_date doesn't precede start_date."""
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError(f"end_date ({self.end_date}) cannot precede start_date ({self.start_date})")
        return self


class TemplateCreate(RightBase):
    template_name: str = Field(..., min_length=1)
    group_ids: list[str] = []
    created_by: str | None = None


class RightUpdate(BaseModel):
    access_state: AccessState | None = None
    basis_access_state: BasisAccessState | None = None
    basis_storage: BasisStorage | None = None
    start_date: date | None = None
    end_date: date | None = None
    licence_contract: str | None = None
    author_right_exception: bool | None = None
    zbw_user_agreement: bool | None = None
    open_content_licence: str | None = None
    non_standard_open_content_licence: bool | None = None
    non_standard_open_content_licence_url: str | None = None
    restricted_open_content_licence: bool | None = None
    notes_general: str | None = None
    notes_formal_rules: str | None = None
    notes_process_documentation: str | None = None
    notes_management_related: str | None = None
    template_name: str | None = None
    template_description: str | None = None
    exception_from: str | None = None
    group_ids: list[str] | None = None
    last_updated_by: str | None = None
