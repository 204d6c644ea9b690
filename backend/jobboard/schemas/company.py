"""Company-related Pydantic schemas."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from jobboard.schemas.common import blank_to_none, require_text, validate_payload


class CompanyStatusFilter(str, Enum):
    """Status filter for the company list (based on the cached active flag)."""
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "CompanyStatusFilter":
        """Unknown or missing values fall back to ALL."""
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return cls.ALL


REQUIRED_LABELS = {
    "ref_id": "Ref ID",
    "name": "Company Name",
    "contact_first_name": "Contact First Name",
    "contact_last_name": "Contact Last Name",
}


class CompanyInput(BaseModel):
    """
    Create/update payload for a company and its primary contact.

    External names are camelCase (refId, contactEmail, ...). The derived
    fields (isActive, totalJobs) are not accepted; extra keys are ignored.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    ref_id: str = Field(default="", validate_default=True)
    name: str = Field(default="", validate_default=True)
    description: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None

    contact_first_name: str = Field(default="", validate_default=True)
    contact_last_name: str = Field(default="", validate_default=True)
    contact_email: EmailStr = Field(default="", validate_default=True)
    contact_role: Optional[str] = None
    contact_phone: Optional[str] = None

    @field_validator("ref_id", "name", "contact_first_name", "contact_last_name", mode="before")
    @classmethod
    def _required(cls, value: Any, info) -> Any:
        return require_text(value, REQUIRED_LABELS[info.field_name])

    @field_validator("description", "industry", "website", "contact_role", "contact_phone", mode="before")
    @classmethod
    def _optional(cls, value: Any) -> Any:
        return blank_to_none(value)

    @field_validator("contact_email", mode="wrap")
    @classmethod
    def _email(cls, value: Any, handler) -> str:
        if isinstance(value, str):
            value = value.strip()
        try:
            return handler(value)
        except ValidationError:
            raise PydanticCustomError("email", "Valid contact email is required")


def validate_company_input(payload: Mapping[str, Any]) -> CompanyInput:
    """
    Validate a company create/update payload.

    Raises:
        ValidationFailure: listing every offending field
    """
    return validate_payload(CompanyInput, payload)


@dataclass(frozen=True)
class Logo:
    """Raw logo image as stored on the company row."""
    mime: str
    data: bytes


class CompanySummary(BaseModel):
    """Row of the company list view."""
    id: UUID
    ref_id: str
    name: str
    description: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    total_jobs: int
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CompanyDetail(CompanySummary):
    """Company with its primary contact; logo bytes are served separately."""
    has_logo: bool = False
    logo_mime: Optional[str] = None
    contact_first_name: Optional[str] = None
    contact_last_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_role: Optional[str] = None
    contact_phone: Optional[str] = None
