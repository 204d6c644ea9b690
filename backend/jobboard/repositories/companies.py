"""
Company Repository - companies, their primary contact and logo.

The derived fields (total_jobs, is_active) are read here but never
written; see jobboard.repositories.recompute.
"""
import logging
import uuid
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, or_, select

from jobboard.config import Settings, get_settings
from jobboard.database import Database
from jobboard.models.company import Company, CompanyContact
from jobboard.repositories.common import capped_limit
from jobboard.schemas.company import (
    CompanyDetail,
    CompanyInput,
    CompanyStatusFilter,
    CompanySummary,
    Logo,
)

logger = logging.getLogger(__name__)

COMPANY_REF_CONFLICT = "Company Ref ID already exists"
DEFAULT_LOGO_MIME = "application/octet-stream"


class CompanyRepository:
    """Data access for companies"""

    def __init__(self, db: Database, settings: Optional[Settings] = None):
        self.db = db
        self.list_limit = (settings or get_settings()).list_limit

    async def list_companies(
        self,
        search: Optional[str] = None,
        status: CompanyStatusFilter = CompanyStatusFilter.ALL,
        limit: Optional[int] = None,
    ) -> List[CompanySummary]:
        """
        List companies, newest first (ties broken by name).

        search matches name or ref_id, case-insensitively. status filters on
        the cached is_active flag. Results are capped at the list limit.
        """
        filters = []

        if status == CompanyStatusFilter.ACTIVE:
            filters.append(Company.is_active.is_(True))
        elif status == CompanyStatusFilter.INACTIVE:
            filters.append(Company.is_active.is_(False))

        search = (search or "").strip()
        if search:
            filters.append(
                or_(
                    Company.name.icontains(search, autoescape=True),
                    Company.ref_id.icontains(search, autoescape=True),
                )
            )

        query = select(Company)
        if filters:
            query = query.where(and_(*filters))
        query = (
            query.order_by(Company.created_at.desc(), Company.name.asc())
            .limit(capped_limit(limit, self.list_limit))
        )

        async with self.db.transaction() as session:
            result = await session.execute(query)
            companies = result.scalars().all()

        logger.info(f"Listed {len(companies)} companies (search={search!r}, status={status.value})")
        return [CompanySummary.model_validate(company) for company in companies]

    async def get_company(self, company_id: UUID) -> Optional[CompanyDetail]:
        """Company with its primary contact and a has_logo flag, or None."""
        query = (
            select(
                Company.id,
                Company.ref_id,
                Company.name,
                Company.description,
                Company.industry,
                Company.website,
                Company.total_jobs,
                Company.is_active,
                Company.created_at,
                Company.logo_mime,
                Company.logo_bytes.is_not(None).label("has_logo"),
                CompanyContact.first_name.label("contact_first_name"),
                CompanyContact.last_name.label("contact_last_name"),
                CompanyContact.email.label("contact_email"),
                CompanyContact.role.label("contact_role"),
                CompanyContact.phone.label("contact_phone"),
            )
            .outerjoin(
                CompanyContact,
                and_(
                    CompanyContact.company_id == Company.id,
                    CompanyContact.is_primary.is_(True),
                ),
            )
            .where(Company.id == company_id)
        )

        async with self.db.transaction() as session:
            result = await session.execute(query)
            row = result.first()

        if row is None:
            return None
        return CompanyDetail.model_validate(dict(row._mapping))

    async def get_company_logo(self, company_id: UUID) -> Optional[Logo]:
        """Stored logo bytes and mime type; None if no company or no logo."""
        async with self.db.transaction() as session:
            result = await session.execute(
                select(Company.logo_mime, Company.logo_bytes).where(Company.id == company_id)
            )
            row = result.first()

        if row is None or row.logo_bytes is None:
            return None
        return Logo(mime=row.logo_mime or DEFAULT_LOGO_MIME, data=bytes(row.logo_bytes))

    async def create_company(self, data: CompanyInput, logo: Optional[Logo] = None) -> UUID:
        """
        Create a company together with its primary contact.

        A new company has no jobs, so it starts with total_jobs=0 and
        is_active=False.

        Raises:
            Conflict: ref_id already used by another company
            StorageFailure: any other database error
        """
        company_id = uuid.uuid4()

        async with self.db.transaction(conflict_message=COMPANY_REF_CONFLICT) as session:
            session.add(
                Company(
                    id=company_id,
                    ref_id=data.ref_id,
                    name=data.name,
                    description=data.description,
                    industry=data.industry,
                    website=data.website,
                    is_active=False,
                    total_jobs=0,
                    logo_mime=logo.mime if logo else None,
                    logo_bytes=logo.data if logo else None,
                )
            )
            # Company row must exist before the contact's foreign key
            await session.flush()

            session.add(
                CompanyContact(
                    company_id=company_id,
                    first_name=data.contact_first_name,
                    last_name=data.contact_last_name,
                    email=data.contact_email,
                    role=data.contact_role,
                    phone=data.contact_phone,
                    is_primary=True,
                )
            )

        logger.info(f"Created company {company_id} ({data.ref_id}: {data.name})")
        return company_id

    async def update_company(
        self,
        company_id: UUID,
        data: CompanyInput,
        logo: Optional[Logo] = None,
    ) -> bool:
        """
        Update company fields and its primary contact.

        The stored logo is replaced only when a new one is given; omitting
        it keeps the current logo. total_jobs/is_active are not touched.

        Returns:
            False if the company does not exist, True otherwise

        Raises:
            Conflict: ref_id already used by another company
            StorageFailure: any other database error
        """
        async with self.db.transaction(conflict_message=COMPANY_REF_CONFLICT) as session:
            result = await session.execute(select(Company).where(Company.id == company_id))
            company = result.scalar_one_or_none()

            if company is not None:
                company.ref_id = data.ref_id
                company.name = data.name
                company.description = data.description
                company.industry = data.industry
                company.website = data.website

                if logo is not None:
                    company.logo_mime = logo.mime
                    company.logo_bytes = logo.data

                contact_result = await session.execute(
                    select(CompanyContact)
                    .where(
                        CompanyContact.company_id == company_id,
                        CompanyContact.is_primary.is_(True),
                    )
                    .limit(1)
                )
                contact = contact_result.scalar_one_or_none()

                if contact is None:
                    contact = CompanyContact(company_id=company_id, is_primary=True)
                    session.add(contact)

                contact.first_name = data.contact_first_name
                contact.last_name = data.contact_last_name
                contact.email = data.contact_email
                contact.role = data.contact_role
                contact.phone = data.contact_phone

        if company is None:
            logger.info(f"Company {company_id} not found for update")
            return False

        logger.info(f"Updated company {company_id} (logo replaced: {logo is not None})")
        return True
