"""
Pytest fixtures for testing.
"""
import pytest
import pytest_asyncio
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport
from sqlalchemy import select

from jobboard.config import Settings
from jobboard.database import Database
from jobboard.main import create_app
from jobboard.models.company import Company
from jobboard.repositories.companies import CompanyRepository
from jobboard.repositories.jobs import JobRepository
from jobboard.repositories.recompute import count_open_jobs
from jobboard.schemas.company import CompanyInput
from jobboard.schemas.job import JobInput


@pytest.fixture
def settings(tmp_path) -> Settings:
    """
    Settings pointing at a fresh SQLite file per test.

    A file (not :memory:) gives every session its own connection, so
    concurrent transactions behave like they do against a real server.
    """
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        list_limit=50,
        debug=True,
    )


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Create all tables for the test and dispose of the engine afterwards."""
    database = Database.from_settings(settings)
    await database.create_all()
    try:
        yield database
    finally:
        await database.close()


@pytest.fixture
def company_repo(database: Database, settings: Settings) -> CompanyRepository:
    return CompanyRepository(database, settings)


@pytest.fixture
def job_repo(database: Database, settings: Settings) -> JobRepository:
    return JobRepository(database, settings)


@pytest.fixture
def company_data():
    """Build a valid CompanyInput, overriding any camelCase field."""
    def _build(**overrides) -> CompanyInput:
        payload = {
            "refId": "ACME-001",
            "name": "Acme Corp",
            "description": "Makes everything",
            "industry": "Manufacturing",
            "website": "https://acme.example.com",
            "contactFirstName": "Jane",
            "contactLastName": "Doe",
            "contactEmail": "jane.doe@acme.example.com",
            "contactRole": "Recruiter",
            "contactPhone": "555-0100",
        }
        payload.update(overrides)
        return CompanyInput.model_validate(payload)

    return _build


@pytest.fixture
def job_data():
    """Build a valid JobInput for a company, overriding any camelCase field."""
    def _build(company_id, **overrides) -> JobInput:
        payload = {
            "companyId": str(company_id),
            "title": "Software Engineer",
            "status": "open",
            "location": "Remote",
            "basis": "full-time",
            "seniority": "Mid-Level",
            "closingDate": "2030-01-31",
            "salaryBands": ["30001-45000"],
            "categories": ["Engineering", "IT"],
            "description": "<p>Build things</p>",
        }
        payload.update(overrides)
        return JobInput.model_validate(payload)

    return _build


@pytest_asyncio.fixture
async def company(company_repo: CompanyRepository, company_data):
    """ID of a freshly created company (no jobs)."""
    return await company_repo.create_company(company_data())


@pytest_asyncio.fixture
async def other_company(company_repo: CompanyRepository, company_data):
    """ID of a second company (no jobs)."""
    return await company_repo.create_company(
        company_data(
            refId="GLOBEX-001",
            name="Globex",
            contactFirstName="Hank",
            contactLastName="Scorpio",
            contactEmail="hank@globex.example.com",
        )
    )


@pytest.fixture
def assert_company_invariants(database: Database):
    """
    Check every company's cached total_jobs/is_active against the live
    count of open jobs.
    """
    async def _check():
        async with database.transaction() as session:
            result = await session.execute(select(Company))
            for row in result.scalars().all():
                open_jobs = await count_open_jobs(session, row.id)
                assert row.total_jobs == open_jobs, f"{row.ref_id}: {row.total_jobs} != {open_jobs}"
                assert row.is_active == (open_jobs > 0), f"{row.ref_id}: is_active={row.is_active}"

    return _check


@pytest_asyncio.fixture
async def client(settings: Settings, database: Database) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client bound to an app that uses the test database.
    """
    app = create_app(settings=settings, database=database)
    transport = ASGITransport(app=app)

    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True  # Follow 307 redirects for trailing slashes
    ) as client:
        yield client
