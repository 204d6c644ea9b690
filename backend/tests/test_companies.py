"""
Tests for the company repository.
"""
import uuid

import pytest
from sqlalchemy import func, select

from jobboard.exceptions import Conflict
from jobboard.models.company import Company, CompanyContact
from jobboard.schemas.company import CompanyStatusFilter, Logo


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x01" * 32


async def count_rows(database, model, *criteria):
    async with database.transaction() as session:
        query = select(func.count()).select_from(model)
        if criteria:
            query = query.where(*criteria)
        result = await session.execute(query)
        return result.scalar_one()


# ============================================================
# CREATE COMPANY TESTS
# ============================================================

@pytest.mark.asyncio
async def test_create_company_starts_inactive(company_repo, company_data):
    company_id = await company_repo.create_company(company_data())

    company = await company_repo.get_company(company_id)
    assert company is not None
    assert company.ref_id == "ACME-001"
    assert company.name == "Acme Corp"
    assert company.total_jobs == 0
    assert company.is_active is False
    assert company.has_logo is False


@pytest.mark.asyncio
async def test_create_company_with_primary_contact(company_repo, company_data):
    company_id = await company_repo.create_company(company_data())

    company = await company_repo.get_company(company_id)
    assert company.contact_first_name == "Jane"
    assert company.contact_last_name == "Doe"
    assert company.contact_email == "jane.doe@acme.example.com"
    assert company.contact_role == "Recruiter"
    assert company.contact_phone == "555-0100"


@pytest.mark.asyncio
async def test_create_company_ignores_client_active_flag(company_repo, company_data):
    company_id = await company_repo.create_company(company_data(isActive=True))

    company = await company_repo.get_company(company_id)
    assert company.is_active is False
    assert company.total_jobs == 0


@pytest.mark.asyncio
async def test_duplicate_ref_id_conflicts_without_partial_insert(company_repo, company_data, database):
    first_id = await company_repo.create_company(company_data())

    with pytest.raises(Conflict) as exc_info:
        await company_repo.create_company(
            company_data(name="Acme Clone", contactEmail="clone@example.com")
        )

    assert "Ref ID already exists" in str(exc_info.value)

    # First company untouched, no orphan contact from the failed attempt
    first = await company_repo.get_company(first_id)
    assert first.name == "Acme Corp"
    assert await count_rows(database, Company) == 1
    assert await count_rows(database, CompanyContact) == 1
    assert await count_rows(database, CompanyContact, CompanyContact.email == "clone@example.com") == 0


@pytest.mark.asyncio
async def test_create_company_with_logo(company_repo, company_data):
    company_id = await company_repo.create_company(
        company_data(), Logo(mime="image/png", data=PNG_BYTES)
    )

    company = await company_repo.get_company(company_id)
    assert company.has_logo is True
    assert company.logo_mime == "image/png"

    logo = await company_repo.get_company_logo(company_id)
    assert logo == Logo(mime="image/png", data=PNG_BYTES)


# ============================================================
# GET COMPANY / LOGO TESTS
# ============================================================

@pytest.mark.asyncio
async def test_get_unknown_company_returns_none(company_repo):
    assert await company_repo.get_company(uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_logo_absent_without_upload(company_repo, company):
    assert await company_repo.get_company_logo(company) is None


@pytest.mark.asyncio
async def test_logo_absent_for_unknown_company(company_repo):
    assert await company_repo.get_company_logo(uuid.uuid4()) is None


# ============================================================
# UPDATE COMPANY TESTS
# ============================================================

@pytest.mark.asyncio
async def test_update_company_fields_and_contact(company_repo, company_data, company):
    updated = await company_repo.update_company(
        company,
        company_data(
            refId="ACME-002",
            name="Acme Holdings",
            description="",
            contactFirstName="John",
            contactEmail="john@acme.example.com",
            contactPhone="",
        ),
    )

    assert updated is True
    detail = await company_repo.get_company(company)
    assert detail.ref_id == "ACME-002"
    assert detail.name == "Acme Holdings"
    assert detail.description is None
    assert detail.contact_first_name == "John"
    assert detail.contact_email == "john@acme.example.com"
    assert detail.contact_phone is None


@pytest.mark.asyncio
async def test_update_without_logo_keeps_stored_logo(company_repo, company_data):
    company_id = await company_repo.create_company(
        company_data(), Logo(mime="image/png", data=PNG_BYTES)
    )

    await company_repo.update_company(company_id, company_data(name="Renamed"))

    logo = await company_repo.get_company_logo(company_id)
    assert logo.mime == "image/png"
    assert logo.data == PNG_BYTES


@pytest.mark.asyncio
async def test_update_with_logo_replaces_it(company_repo, company_data):
    company_id = await company_repo.create_company(
        company_data(), Logo(mime="image/png", data=PNG_BYTES)
    )

    await company_repo.update_company(
        company_id, company_data(), Logo(mime="image/jpeg", data=JPEG_BYTES)
    )

    logo = await company_repo.get_company_logo(company_id)
    assert logo == Logo(mime="image/jpeg", data=JPEG_BYTES)


@pytest.mark.asyncio
async def test_update_adds_logo_to_company_without_one(company_repo, company_data, company):
    await company_repo.update_company(company, company_data(), Logo(mime="image/png", data=PNG_BYTES))

    detail = await company_repo.get_company(company)
    assert detail.has_logo is True


@pytest.mark.asyncio
async def test_update_unknown_company_returns_false(company_repo, company_data, database):
    assert await company_repo.update_company(uuid.uuid4(), company_data()) is False
    assert await count_rows(database, CompanyContact) == 0


@pytest.mark.asyncio
async def test_update_to_taken_ref_id_conflicts(company_repo, company_data, company, other_company):
    with pytest.raises(Conflict):
        await company_repo.update_company(other_company, company_data(refId="ACME-001", name="Globex"))

    detail = await company_repo.get_company(other_company)
    assert detail.ref_id == "GLOBEX-001"


@pytest.mark.asyncio
async def test_update_inserts_missing_primary_contact(company_repo, company_data, company, database):
    async with database.transaction() as session:
        contact = (
            await session.execute(select(CompanyContact).where(CompanyContact.company_id == company))
        ).scalar_one()
        await session.delete(contact)

    assert (await company_repo.get_company(company)).contact_email is None

    await company_repo.update_company(company, company_data(contactEmail="new@acme.example.com"))

    detail = await company_repo.get_company(company)
    assert detail.contact_email == "new@acme.example.com"
    assert await count_rows(database, CompanyContact, CompanyContact.company_id == company) == 1


@pytest.mark.asyncio
async def test_update_company_leaves_job_counts_alone(company_repo, job_repo, company_data, job_data, company):
    await job_repo.create_job(job_data(company, status="open"))

    await company_repo.update_company(company, company_data(name="Renamed", isActive=False))

    detail = await company_repo.get_company(company)
    assert detail.total_jobs == 1
    assert detail.is_active is True


# ============================================================
# LIST COMPANIES TESTS
# ============================================================

@pytest.mark.asyncio
async def test_list_companies_newest_first(company_repo, company, other_company):
    companies = await company_repo.list_companies()

    assert [c.id for c in companies] == [other_company, company]


@pytest.mark.asyncio
async def test_list_companies_search_name_or_ref(company_repo, company, other_company):
    by_name = await company_repo.list_companies(search="acme")
    assert [c.id for c in by_name] == [company]

    by_ref = await company_repo.list_companies(search="globex-0")
    assert [c.id for c in by_ref] == [other_company]

    assert await company_repo.list_companies(search="initech") == []


@pytest.mark.asyncio
async def test_list_companies_search_treats_wildcards_literally(company_repo, company):
    assert await company_repo.list_companies(search="%") == []


@pytest.mark.asyncio
async def test_list_companies_status_filter(company_repo, job_repo, job_data, company, other_company):
    await job_repo.create_job(job_data(company, status="open"))

    active = await company_repo.list_companies(status=CompanyStatusFilter.ACTIVE)
    inactive = await company_repo.list_companies(status=CompanyStatusFilter.INACTIVE)
    everything = await company_repo.list_companies(status=CompanyStatusFilter.ALL)

    assert [c.id for c in active] == [company]
    assert active[0].total_jobs == 1
    assert [c.id for c in inactive] == [other_company]
    assert len(everything) == 2


@pytest.mark.asyncio
async def test_list_companies_is_capped(company_repo, company_data):
    for i in range(5):
        await company_repo.create_company(company_data(refId=f"REF-{i}", name=f"Company {i}"))

    assert len(await company_repo.list_companies(limit=3)) == 3

    company_repo.list_limit = 2
    assert len(await company_repo.list_companies()) == 2
    assert len(await company_repo.list_companies(limit=10)) == 2


@pytest.mark.asyncio
async def test_list_companies_negative_limit_uses_cap(company_repo, company_data):
    for i in range(5):
        await company_repo.create_company(company_data(refId=f"REF-{i}", name=f"Company {i}"))

    company_repo.list_limit = 2
    assert len(await company_repo.list_companies(limit=-1)) == 2
    assert len(await company_repo.list_companies(limit=0)) == 2
