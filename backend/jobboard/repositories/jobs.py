"""
Job Repository - job postings and the company consistency protocol.

Every mutation runs in one transaction that also recomputes the derived
fields of each affected company:

- create: the job's company
- update: the company the job belonged to before the update, then the
  new company if the job was reassigned
- delete: the job's company

Company rows are locked (SELECT ... FOR UPDATE, in id order) before the
job mutation so concurrent mutations for one company serialize.
"""
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional, Set
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import Settings, get_settings
from jobboard.database import Database
from jobboard.exceptions import Issue, ValidationFailure
from jobboard.models.company import Company
from jobboard.models.job import Job
from jobboard.repositories.common import capped_limit
from jobboard.repositories.recompute import recompute_company_jobs
from jobboard.schemas.job import JobDetail, JobInput, JobStatusFilter, JobSummary

logger = logging.getLogger(__name__)

JOB_REF_CONFLICT = "Job Ref ID already exists for this company"


def _job_values(data: JobInput) -> Dict[str, Any]:
    """Column values for a job row from a validated payload."""
    return {
        "company_id": data.company_id,
        "ref_id": data.ref_id,
        "title": data.title,
        "status": data.status.value,
        "location": data.location,
        "basis": data.basis,
        "seniority": data.seniority,
        "closing_date": data.closing_date,
        "salary_bands": list(data.salary_bands),
        "categories": list(data.categories),
        "description": data.description,
    }


async def _lock_companies(session: AsyncSession, company_ids: Iterable[UUID]) -> Set[UUID]:
    """Lock the given company rows in id order; returns the ids that exist."""
    ids = sorted(set(company_ids), key=str)
    result = await session.execute(
        select(Company.id)
        .where(Company.id.in_(ids))
        .order_by(Company.id)
        .with_for_update()
    )
    return set(result.scalars().all())


def _unknown_company(company_id: UUID) -> ValidationFailure:
    return ValidationFailure([Issue(path=("companyId",), message=f"Company {company_id} does not exist")])


class JobRepository:
    """Data access for job postings"""

    def __init__(self, db: Database, settings: Optional[Settings] = None):
        self.db = db
        self.list_limit = (settings or get_settings()).list_limit

    async def list_jobs(
        self,
        search: Optional[str] = None,
        status: JobStatusFilter = JobStatusFilter.ALL,
        company_id: Optional[UUID] = None,
        limit: Optional[int] = None,
    ) -> List[JobSummary]:
        """
        List jobs newest first, with company name and ref id joined in.

        search matches job title, job ref_id or company name,
        case-insensitively. All filters combine with AND.
        """
        filters = []

        if company_id is not None:
            filters.append(Job.company_id == company_id)

        if status != JobStatusFilter.ALL:
            filters.append(Job.status == status.value)

        search = (search or "").strip()
        if search:
            filters.append(
                or_(
                    Job.title.icontains(search, autoescape=True),
                    Job.ref_id.icontains(search, autoescape=True),
                    Company.name.icontains(search, autoescape=True),
                )
            )

        query = select(
            Job.id,
            Job.company_id,
            Company.name.label("company_name"),
            Company.ref_id.label("company_ref_id"),
            Job.ref_id,
            Job.title,
            Job.status,
            Job.closing_date,
            Job.created_at,
            Job.updated_at,
        ).join(Company, Company.id == Job.company_id)
        if filters:
            query = query.where(and_(*filters))
        query = (
            query.order_by(Job.created_at.desc(), Job.title.asc())
            .limit(capped_limit(limit, self.list_limit))
        )

        async with self.db.transaction() as session:
            result = await session.execute(query)
            rows = result.all()

        logger.info(
            f"Listed {len(rows)} jobs (search={search!r}, status={status.value}, company={company_id})"
        )
        return [JobSummary.model_validate(dict(row._mapping)) for row in rows]

    async def get_job(self, job_id: UUID) -> Optional[JobDetail]:
        async with self.db.transaction() as session:
            result = await session.execute(select(Job).where(Job.id == job_id))
            job = result.scalar_one_or_none()

        if job is None:
            return None
        return JobDetail.model_validate(job)

    async def create_job(self, data: JobInput) -> UUID:
        """
        Create a job and recompute its company in the same transaction.

        Raises:
            ValidationFailure: company_id does not reference a company
            Conflict: ref_id already used by another job of the company
            StorageFailure: any other database error
        """
        job_id = uuid.uuid4()

        async with self.db.transaction(conflict_message=JOB_REF_CONFLICT) as session:
            if data.company_id not in await _lock_companies(session, [data.company_id]):
                raise _unknown_company(data.company_id)

            session.add(Job(id=job_id, **_job_values(data)))
            await session.flush()

            await recompute_company_jobs(session, data.company_id)

        logger.info(f"Created job {job_id} ({data.status.value}) for company {data.company_id}")
        return job_id

    async def update_job(self, job_id: UUID, data: JobInput) -> bool:
        """
        Update a job, recomputing the origin company and, when the job moved,
        the target company too.

        Returns:
            False if the job does not exist (nothing is changed), True otherwise

        Raises:
            ValidationFailure: the new company_id does not reference a company
            Conflict: ref_id already used by another job of the target company
            StorageFailure: any other database error
        """
        async with self.db.transaction(conflict_message=JOB_REF_CONFLICT) as session:
            result = await session.execute(select(Job).where(Job.id == job_id).with_for_update())
            job = result.scalar_one_or_none()

            if job is not None:
                origin_id = job.company_id
                target_id = data.company_id

                if target_id not in await _lock_companies(session, [origin_id, target_id]):
                    raise _unknown_company(target_id)

                for column, value in _job_values(data).items():
                    setattr(job, column, value)
                await session.flush()

                await recompute_company_jobs(session, origin_id)
                if target_id != origin_id:
                    await recompute_company_jobs(session, target_id)

        if job is None:
            logger.info(f"Job {job_id} not found for update")
            return False

        if target_id != origin_id:
            logger.info(f"Updated job {job_id}, moved from company {origin_id} to {target_id}")
        else:
            logger.info(f"Updated job {job_id} (company {origin_id})")
        return True

    async def delete_job(self, job_id: UUID) -> bool:
        """
        Delete a job and recompute its company.

        Returns:
            False if the job does not exist, True otherwise
        """
        async with self.db.transaction() as session:
            result = await session.execute(select(Job).where(Job.id == job_id).with_for_update())
            job = result.scalar_one_or_none()

            if job is not None:
                company_id = job.company_id
                await _lock_companies(session, [company_id])

                await session.delete(job)
                await session.flush()

                await recompute_company_jobs(session, company_id)

        if job is None:
            logger.info(f"Job {job_id} not found for delete")
            return False

        logger.info(f"Deleted job {job_id} from company {company_id}")
        return True
