"""Database models"""
from jobboard.models.company import Company, CompanyContact
from jobboard.models.job import Job, JobStatus

__all__ = [
    "Company",
    "CompanyContact",
    "Job",
    "JobStatus",
]
