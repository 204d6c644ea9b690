"""
Recalculation of a company's derived job fields.

ALL writes to companies.total_jobs / companies.is_active go through
recompute_company_jobs(). It is one step of the caller's transaction and
derives both fields from the live jobs table in a single statement.
"""
import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models.company import Company
from jobboard.models.job import Job, JobStatus

logger = logging.getLogger(__name__)


def _open_jobs_count(company_id: UUID):
    return (
        select(func.count(Job.id))
        .where(Job.company_id == company_id, Job.status == JobStatus.OPEN.value)
        .scalar_subquery()
    )


async def recompute_company_jobs(session: AsyncSession, company_id: UUID) -> None:
    """
    Set total_jobs to the number of OPEN jobs for the company and
    is_active to total_jobs > 0.

    Never opens or commits a transaction itself; the caller's commit or
    rollback covers this write together with the job mutation.

    Raises:
        RuntimeError: if the session has no open transaction
    """
    if not session.in_transaction():
        raise RuntimeError("recompute_company_jobs must run inside an open transaction")

    # Make pending job changes visible to the count
    await session.flush()

    open_jobs = _open_jobs_count(company_id)
    await session.execute(
        update(Company)
        .where(Company.id == company_id)
        .values(total_jobs=open_jobs, is_active=open_jobs > 0)
        .execution_options(synchronize_session=False)
    )
    logger.debug(f"Recomputed open jobs for company {company_id}")


async def count_open_jobs(session: AsyncSession, company_id: UUID) -> int:
    """Live count of OPEN jobs for a company, straight from the jobs table."""
    result = await session.execute(select(_open_jobs_count(company_id)))
    return result.scalar_one()
