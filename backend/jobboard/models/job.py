from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, Index, UniqueConstraint, CheckConstraint
import uuid

from jobboard.database import Base
from jobboard.database_types import GUID, StringArray


class JobStatus(str, Enum):
    """Lifecycle status of a job posting. Only OPEN jobs count towards a company."""
    OPEN = "open"
    CLOSED = "closed"
    DRAFT = "draft"


class Job(Base):
    __tablename__ = "jobs"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    company_id = Column(GUID, ForeignKey("companies.id"), nullable=False)

    # Unique per company when set
    ref_id = Column(String(100), nullable=True)

    title = Column(String(255), nullable=False)
    status = Column(String(16), nullable=False, default=JobStatus.DRAFT.value)
    location = Column(String(255), nullable=True)
    basis = Column(String(100), nullable=True)  # full-time | part-time | contract
    seniority = Column(String(50), nullable=True)
    closing_date = Column(Date, nullable=True)
    salary_bands = Column(StringArray, nullable=False, default=list)
    categories = Column(StringArray, nullable=False, default=list)
    description = Column(Text, nullable=True)  # HTML from the rich-text editor

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("company_id", "ref_id", name="uq_jobs_company_ref_id"),
        CheckConstraint("status IN ('open', 'closed', 'draft')", name="ck_jobs_status"),
        # Backs the open-job count used by recomputation
        Index("idx_jobs_company_status", "company_id", "status"),
        Index("idx_jobs_created_at", "created_at"),
    )
