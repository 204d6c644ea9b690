"""Company and primary-contact models."""
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, Integer, Boolean, LargeBinary, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import deferred
import uuid

from jobboard.database import Base
from jobboard.database_types import GUID


class Company(Base):
    __tablename__ = "companies"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    ref_id = Column(String(100), nullable=False)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    industry = Column(String(255), nullable=True)
    website = Column(String(500), nullable=True)

    # Derived from open jobs; only written by the recompute routine
    is_active = Column(Boolean, nullable=False, default=False, index=True)
    total_jobs = Column(Integer, nullable=False, default=0)

    # Logo stored inline; bytes are deferred so list/detail reads skip them
    logo_mime = Column(String(100), nullable=True)
    logo_bytes = deferred(Column(LargeBinary, nullable=True))

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("ref_id", name="uq_companies_ref_id"),
    )


class CompanyContact(Base):
    __tablename__ = "company_contacts"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    company_id = Column(GUID, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=False)
    role = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    is_primary = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_company_contacts_primary", "company_id", "is_primary"),
    )
