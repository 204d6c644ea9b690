"""
Jobs API endpoints.
Handles job posting CRUD operations.
"""
import logging
import uuid
from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from jobboard.dependencies import get_job_options, get_job_repository
from jobboard.exceptions import Issue, ValidationFailure
from jobboard.repositories.jobs import JobRepository
from jobboard.schemas.job import JobOptions, JobStatusFilter, validate_job_input

# Configure logger
logger = logging.getLogger(__name__)

router = APIRouter()


async def read_json_body(request: Request) -> Any:
    """Request JSON, or None when the body is missing or malformed."""
    try:
        return await request.json()
    except ValueError:
        return None


def parse_company_filter(raw: Optional[str]) -> Optional[UUID]:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise ValidationFailure([Issue(path=("companyId",), message="Invalid company id")])


# ============================================================
# ENDPOINTS
# ============================================================

@router.get("/")
async def list_jobs(
    search: str = Query("", description="Matches title, ref id or company name"),
    status: str = Query("all", description="all | open | closed | draft"),
    company_id: Optional[str] = Query(None, alias="companyId"),
    repo: JobRepository = Depends(get_job_repository),
):
    """List job postings, newest first."""
    jobs = await repo.list_jobs(
        search=search,
        status=JobStatusFilter.parse(status),
        company_id=parse_company_filter(company_id),
    )
    return {"jobs": jobs}


@router.post("/", status_code=201)
async def create_job(
    request: Request,
    options: JobOptions = Depends(get_job_options),
    repo: JobRepository = Depends(get_job_repository),
):
    """Create a job posting; the owning company's status is recomputed."""
    data = validate_job_input(await read_json_body(request), options)
    job_id = await repo.create_job(data)
    return {"id": job_id}


@router.get("/{job_id}")
async def get_job(
    job_id: UUID,
    repo: JobRepository = Depends(get_job_repository),
):
    job = await repo.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return {"job": job}


@router.patch("/{job_id}")
async def update_job(
    job_id: UUID,
    request: Request,
    options: JobOptions = Depends(get_job_options),
    repo: JobRepository = Depends(get_job_repository),
):
    """
    Replace a job posting's fields.

    Moving the job to another company recomputes both companies.
    """
    data = validate_job_input(await read_json_body(request), options)
    if not await repo.update_job(job_id, data):
        raise HTTPException(status_code=404, detail="Job not found")
    return {"ok": True}


@router.delete("/{job_id}")
async def delete_job(
    job_id: UUID,
    repo: JobRepository = Depends(get_job_repository),
):
    if not await repo.delete_job(job_id):
        raise HTTPException(status_code=404, detail="Job not found")
    return {"ok": True}
