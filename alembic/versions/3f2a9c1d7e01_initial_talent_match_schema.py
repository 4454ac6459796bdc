"""initial_talent_match_schema

Creates the job posting, candidate, match analysis, CV library and CV
optimization tables.

Single-active invariants for job postings and library CVs are enforced by
partial unique indexes on is_active.

Revision ID: 3f2a9c1d7e01
Revises:
Create Date: 2026-10-17 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e01'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

candidate_status = sa.Enum('pending', 'shortlisted', 'rejected', 'hired', name='candidate_status')
application_method = sa.Enum('ats', 'email', name='application_method')
optimization_status = sa.Enum('processing', 'completed', 'failed', name='optimization_status')


def upgrade() -> None:
    """Create all tables."""

    # 1. Job postings
    op.create_table(
        'job_postings',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('company', sa.String(), nullable=False, server_default=''),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('salary_range', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('requirements', sa.Text(), nullable=False, server_default=''),
        sa.Column('file_name', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('embedding', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_job_postings_id', 'job_postings', ['id'])
    op.create_index('ix_job_postings_title', 'job_postings', ['title'])
    op.create_index(
        'uq_job_postings_single_active', 'job_postings', ['is_active'],
        unique=True, postgresql_where=sa.text('is_active')
    )

    # 2. Candidates
    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('job_posting_id', sa.Integer(), sa.ForeignKey('job_postings.id'), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('skills', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('skills_text', sa.Text(), nullable=False, server_default=''),
        sa.Column('experience', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('education', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('certifications', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('raw_text', sa.Text(), nullable=False),
        sa.Column('file_name', sa.String(), nullable=False),
        sa.Column('embedding', sa.Text(), nullable=True),
        sa.Column('status', candidate_status, nullable=False, server_default='pending'),
        sa.Column('interview_notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_candidates_id', 'candidates', ['id'])
    op.create_index('ix_candidates_job_posting_id', 'candidates', ['job_posting_id'])
    op.create_index('ix_candidates_status', 'candidates', ['status'])
    op.create_index('ix_candidates_created_at', 'candidates', ['created_at'])

    # 3. Match analyses (one per candidate)
    op.create_table(
        'match_analyses',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('candidate_id', sa.Integer(), sa.ForeignKey('candidates.id'), nullable=False),
        sa.Column('job_posting_id', sa.Integer(), sa.ForeignKey('job_postings.id'), nullable=False),
        sa.Column('match_score', sa.Float(), nullable=False),
        sa.Column('skills_match', sa.Float(), nullable=False, server_default='0'),
        sa.Column('experience_match', sa.Float(), nullable=False, server_default='0'),
        sa.Column('education_match', sa.Float(), nullable=False, server_default='0'),
        sa.Column('industry_match', sa.Float(), nullable=False, server_default='0'),
        sa.Column('strengths', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('weaknesses', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('recommendation', sa.Text(), nullable=True),
        sa.Column('detailed_analysis', sa.Text(), nullable=True),
        sa.Column('is_match', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_match_analyses_id', 'match_analyses', ['id'])
    op.create_index('ix_match_analyses_candidate_id', 'match_analyses', ['candidate_id'], unique=True)
    op.create_index('ix_match_analyses_job_posting_id', 'match_analyses', ['job_posting_id'])
    op.create_index('ix_match_analyses_match_score', 'match_analyses', ['match_score'])

    # 4. CV library
    op.create_table(
        'cv_library',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('file_name', sa.String(), nullable=False),
        sa.Column('cv_text', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_cv_library_id', 'cv_library', ['id'])
    op.create_index(
        'uq_cv_library_single_active', 'cv_library', ['is_active'],
        unique=True, postgresql_where=sa.text('is_active')
    )

    # 5. CV optimizations
    op.create_table(
        'cv_optimizations',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('cv_library_id', sa.Integer(), sa.ForeignKey('cv_library.id', ondelete='SET NULL'), nullable=True),
        sa.Column('original_cv_text', sa.Text(), nullable=False),
        sa.Column('job_description_text', sa.Text(), nullable=False),
        sa.Column('application_method', application_method, nullable=False),
        sa.Column('optimized_cv_text', sa.Text(), nullable=True),
        sa.Column('improvement_suggestions', postgresql.JSONB(), nullable=True),
        sa.Column('keyword_matches', postgresql.JSONB(), nullable=True),
        sa.Column('skills_alignment', postgresql.JSONB(), nullable=True),
        sa.Column('experience_alignment', postgresql.JSONB(), nullable=True),
        sa.Column('overall_score', sa.Float(), nullable=True),
        sa.Column('processing_steps', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('status', optimization_status, nullable=False, server_default='processing'),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_cv_optimizations_id', 'cv_optimizations', ['id'])
    op.create_index('ix_cv_optimizations_status', 'cv_optimizations', ['status'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('cv_optimizations')
    op.drop_table('cv_library')
    op.drop_table('match_analyses')
    op.drop_table('candidates')
    op.drop_table('job_postings')

    optimization_status.drop(op.get_bind(), checkfirst=True)
    application_method.drop(op.get_bind(), checkfirst=True)
    candidate_status.drop(op.get_bind(), checkfirst=True)
