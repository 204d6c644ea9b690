"""Job-related Pydantic schemas."""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from jobboard.config import Settings, get_settings
from jobboard.models.job import JobStatus
from jobboard.schemas.common import blank_to_none, require_text, validate_payload

MIN_CATEGORIES = 1
MAX_CATEGORIES = 3


class JobStatusFilter(str, Enum):
    """Status filter for the job list."""
    ALL = "all"
    OPEN = "open"
    CLOSED = "closed"
    DRAFT = "draft"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "JobStatusFilter":
        """Unknown or missing values fall back to ALL."""
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return cls.ALL


@dataclass(frozen=True)
class JobOptions:
    """The configured tag lists a job payload is checked against."""
    seniority: Tuple[str, ...] = field(default_factory=tuple)
    salary_bands: Tuple[str, ...] = field(default_factory=tuple)
    categories: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "JobOptions":
        settings = settings or get_settings()
        return cls(
            seniority=tuple(settings.seniority_options),
            salary_bands=tuple(settings.salary_bands),
            categories=tuple(settings.job_categories),
        )


def salary_band_label(band: str) -> str:
    """Display label for a salary band: "11532-20000" becomes "11,532 – 20,000"."""
    if band.endswith("+") and band[:-1].isdigit():
        return f"{int(band[:-1]):,}+"
    low, sep, high = band.partition("-")
    if sep and low.isdigit() and high.isdigit():
        return f"{int(low):,} – {int(high):,}"
    return band


def _options(info: ValidationInfo) -> JobOptions:
    if info.context and info.context.get("options") is not None:
        return info.context["options"]
    return JobOptions.from_settings()


def _dedupe(values: List[str]) -> List[str]:
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


class JobInput(BaseModel):
    """
    Create/update payload for a job posting.

    refId, location, basis, seniority, closingDate and description are
    optional; blank strings are stored as NULL. status defaults to draft.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    company_id: UUID = Field(default=None, validate_default=True)
    ref_id: Optional[str] = None
    title: str = Field(default="", validate_default=True)
    status: JobStatus = JobStatus.DRAFT
    location: Optional[str] = None
    basis: Optional[str] = None
    seniority: Optional[str] = None
    closing_date: Optional[date] = None
    salary_bands: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list, validate_default=True)
    description: Optional[str] = None

    @field_validator("company_id", mode="before")
    @classmethod
    def _company_required(cls, value: Any) -> Any:
        return require_text(value, "Company")

    @field_validator("title", mode="before")
    @classmethod
    def _title_required(cls, value: Any) -> Any:
        return require_text(value, "Title")

    @field_validator("ref_id", "location", "basis", "seniority", "closing_date", "description", mode="before")
    @classmethod
    def _optional(cls, value: Any) -> Any:
        return blank_to_none(value)

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        if blank_to_none(value) is None:
            return JobStatus.DRAFT
        return value

    @field_validator("salary_bands", mode="before")
    @classmethod
    def _no_bands(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("seniority")
    @classmethod
    def _check_seniority(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        allowed = _options(info).seniority
        if value is not None and value not in allowed:
            raise PydanticCustomError(
                "seniority",
                "Seniority must be one of: {allowed}",
                {"allowed": ", ".join(allowed)},
            )
        return value

    @field_validator("salary_bands")
    @classmethod
    def _check_salary_bands(cls, value: List[str], info: ValidationInfo) -> List[str]:
        allowed = _options(info).salary_bands
        unknown = [band for band in value if band not in allowed]
        if unknown:
            raise PydanticCustomError(
                "salary_band",
                "Unknown salary band(s): {unknown}",
                {"unknown": ", ".join(unknown)},
            )
        return _dedupe(value)

    @field_validator("categories")
    @classmethod
    def _check_categories(cls, value: List[str], info: ValidationInfo) -> List[str]:
        allowed = _options(info).categories
        unknown = [category for category in value if category not in allowed]
        if unknown:
            raise PydanticCustomError(
                "category",
                "Unknown category(ies): {unknown}",
                {"unknown": ", ".join(unknown)},
            )
        value = _dedupe(value)
        if len(value) < MIN_CATEGORIES:
            raise PydanticCustomError("categories_min", "Select at least 1 category")
        if len(value) > MAX_CATEGORIES:
            raise PydanticCustomError("categories_max", "Select at most 3 categories")
        return value


def validate_job_input(payload: Mapping[str, Any], options: Optional[JobOptions] = None) -> JobInput:
    """
    Validate a job create/update payload against the configured option lists.

    Raises:
        ValidationFailure: listing every offending field
    """
    return validate_payload(JobInput, payload, context={"options": options or JobOptions.from_settings()})


class JobSummary(BaseModel):
    """Row of the job list view, with the owning company joined in."""
    id: UUID
    company_id: UUID
    company_name: str
    company_ref_id: str
    ref_id: Optional[str] = None
    title: str
    status: JobStatus
    closing_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class JobDetail(BaseModel):
    """Full job record."""
    id: UUID
    company_id: UUID
    ref_id: Optional[str] = None
    title: str
    status: JobStatus
    location: Optional[str] = None
    basis: Optional[str] = None
    seniority: Optional[str] = None
    closing_date: Optional[date] = None
    salary_bands: List[str] = []
    categories: List[str] = []
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
