"""create_companies_contacts_and_jobs

Revision ID: 20261019_0000
Revises:
Create Date: 2026-10-19 00:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa

from jobboard.database_types import GUID, StringArray


revision = '20261019_0000'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'companies',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('ref_id', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('industry', sa.String(length=255), nullable=True),
        sa.Column('website', sa.String(length=500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('total_jobs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('logo_mime', sa.String(length=100), nullable=True),
        sa.Column('logo_bytes', sa.LargeBinary(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('ref_id', name='uq_companies_ref_id'),
    )
    op.create_index(op.f('ix_companies_name'), 'companies', ['name'], unique=False)
    op.create_index(op.f('ix_companies_is_active'), 'companies', ['is_active'], unique=False)

    op.create_table(
        'company_contacts',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('company_id', GUID(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], name='fk_company_contacts_company_id', ondelete='CASCADE'),
    )
    op.create_index('idx_company_contacts_primary', 'company_contacts', ['company_id', 'is_primary'], unique=False)

    op.create_table(
        'jobs',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('company_id', GUID(), nullable=False),
        sa.Column('ref_id', sa.String(length=100), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='draft'),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('basis', sa.String(length=100), nullable=True),
        sa.Column('seniority', sa.String(length=50), nullable=True),
        sa.Column('closing_date', sa.Date(), nullable=True),
        sa.Column('salary_bands', StringArray(), nullable=False),
        sa.Column('categories', StringArray(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], name='fk_jobs_company_id'),
        # NULL ref ids never collide, so only set ref ids are unique per company
        sa.UniqueConstraint('company_id', 'ref_id', name='uq_jobs_company_ref_id'),
        sa.CheckConstraint("status IN ('open', 'closed', 'draft')", name='ck_jobs_status'),
    )
    op.create_index('idx_jobs_company_status', 'jobs', ['company_id', 'status'], unique=False)
    op.create_index('idx_jobs_created_at', 'jobs', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_jobs_created_at', table_name='jobs')
    op.drop_index('idx_jobs_company_status', table_name='jobs')
    op.drop_table('jobs')

    op.drop_index('idx_company_contacts_primary', table_name='company_contacts')
    op.drop_table('company_contacts')

    op.drop_index(op.f('ix_companies_is_active'), table_name='companies')
    op.drop_index(op.f('ix_companies_name'), table_name='companies')
    op.drop_table('companies')
