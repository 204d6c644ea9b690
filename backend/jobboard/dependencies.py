"""
Dependency Injection
"""
from fastapi import Depends, Request

from jobboard.config import Settings
from jobboard.database import Database, get_database
from jobboard.repositories.companies import CompanyRepository
from jobboard.repositories.jobs import JobRepository
from jobboard.schemas.job import JobOptions


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with"""
    return request.app.state.settings


def get_company_repository(
    db: Database = Depends(get_database),
    settings: Settings = Depends(get_app_settings),
) -> CompanyRepository:
    return CompanyRepository(db, settings)


def get_job_repository(
    db: Database = Depends(get_database),
    settings: Settings = Depends(get_app_settings),
) -> JobRepository:
    return JobRepository(db, settings)


def get_job_options(settings: Settings = Depends(get_app_settings)) -> JobOptions:
    return JobOptions.from_settings(settings)
