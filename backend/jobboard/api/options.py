"""Option lists the job form offers (seniority, salary bands, categories)."""
from fastapi import APIRouter, Depends

from jobboard.dependencies import get_job_options
from jobboard.schemas.job import MAX_CATEGORIES, MIN_CATEGORIES, JobOptions, salary_band_label
from jobboard.models.job import JobStatus

router = APIRouter()


@router.get("/")
async def get_options(options: JobOptions = Depends(get_job_options)):
    return {
        "statuses": [status.value for status in JobStatus],
        "seniority": list(options.seniority),
        "salary_bands": [
            {"value": band, "label": salary_band_label(band)} for band in options.salary_bands
        ],
        "categories": list(options.categories),
        "categories_min": MIN_CATEGORIES,
        "categories_max": MAX_CATEGORIES,
    }
