"""
Companies API endpoints.

Create and update take multipart form data so a logo file can be uploaded
alongside the fields.
"""
import logging
from typing import Any, Optional, Tuple
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from starlette.datastructures import UploadFile

from jobboard.config import Settings
from jobboard.dependencies import get_app_settings, get_company_repository
from jobboard.exceptions import Issue, ValidationFailure
from jobboard.repositories.companies import DEFAULT_LOGO_MIME, CompanyRepository
from jobboard.schemas.company import (
    CompanyInput,
    CompanyStatusFilter,
    Logo,
    validate_company_input,
)

logger = logging.getLogger(__name__)

router = APIRouter()

COMPANY_FORM_FIELDS = (
    "refId",
    "name",
    "description",
    "industry",
    "website",
    "contactFirstName",
    "contactLastName",
    "contactEmail",
    "contactRole",
    "contactPhone",
)


async def read_logo(upload: Any, max_size_mb: int) -> Optional[Logo]:
    """
    Turn an uploaded logo file into a Logo.

    A missing or empty upload means "no new logo".

    Raises:
        ValidationFailure: file is not an image or is too large
    """
    if not isinstance(upload, UploadFile):
        return None

    data = await upload.read()
    if not data:
        return None

    mime = upload.content_type or DEFAULT_LOGO_MIME
    if not mime.startswith("image/"):
        raise ValidationFailure([Issue(path=("logo",), message="Logo must be an image file")])

    if len(data) > max_size_mb * 1024 * 1024:
        raise ValidationFailure(
            [Issue(path=("logo",), message=f"Logo too large. Maximum size: {max_size_mb}MB")]
        )

    return Logo(mime=mime, data=data)


async def read_company_form(request: Request, settings: Settings) -> Tuple[CompanyInput, Optional[Logo]]:
    """
    Validate the company form fields and the logo together.

    Raises:
        ValidationFailure: listing field issues and logo issues in one go
    """
    form = await request.form()
    payload = {field: str(form.get(field) or "").strip() for field in COMPANY_FORM_FIELDS}

    issues = []
    data = logo = None
    try:
        data = validate_company_input(payload)
    except ValidationFailure as e:
        issues.extend(e.issues)
    try:
        logo = await read_logo(form.get("logo"), settings.max_logo_size_mb)
    except ValidationFailure as e:
        issues.extend(e.issues)

    if issues:
        raise ValidationFailure(issues)
    return data, logo


# ============================================================
# ENDPOINTS
# ============================================================

@router.get("/")
async def list_companies(
    search: str = Query("", description="Matches name or ref id"),
    status: str = Query("all", description="all | active | inactive"),
    repo: CompanyRepository = Depends(get_company_repository),
):
    """List companies, newest first."""
    companies = await repo.list_companies(search=search, status=CompanyStatusFilter.parse(status))
    return {"companies": companies}


@router.post("/", status_code=201)
async def create_company(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    repo: CompanyRepository = Depends(get_company_repository),
):
    """
    Create a company with its primary contact and optional logo.

    The company starts inactive; its status follows its open jobs.
    """
    data, logo = await read_company_form(request, settings)

    company_id = await repo.create_company(data, logo)
    return {"id": company_id}


@router.get("/{company_id}")
async def get_company(
    company_id: UUID,
    repo: CompanyRepository = Depends(get_company_repository),
):
    company = await repo.get_company(company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return {"company": company}


@router.patch("/{company_id}")
async def update_company(
    company_id: UUID,
    request: Request,
    settings: Settings = Depends(get_app_settings),
    repo: CompanyRepository = Depends(get_company_repository),
):
    """
    Update a company and its primary contact.

    Leaving out the logo keeps the stored one.
    """
    data, logo = await read_company_form(request, settings)

    if not await repo.update_company(company_id, data, logo):
        raise HTTPException(status_code=404, detail="Company not found")
    return {"ok": True}


@router.get("/{company_id}/logo")
async def get_company_logo(
    company_id: UUID,
    repo: CompanyRepository = Depends(get_company_repository),
):
    """Serve the stored logo bytes."""
    logo = await repo.get_company_logo(company_id)
    if not logo:
        return Response(status_code=404)

    return Response(
        content=logo.data,
        media_type=logo.mime,
        headers={"Cache-Control": "public, max-age=3600"},
    )
