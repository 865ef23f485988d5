"""Initial StairProperty CRM schema

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-19

Organisations, memberships and the shared-ownership portfolio tables.
Money and percentages are stored as floating point GBP / percent values.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _org_fk():
    return sa.Column(
        'organisation_id',
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey('organisations.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    # === USERS ===
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('firebase_uid', sa.String(128), unique=True, nullable=False, index=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False, index=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), default=True),
        *_timestamps(),
    )

    # === ORGANISATIONS ===
    op.create_table(
        'organisations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        *_timestamps(),
    )

    # === USER ORGANISATIONS ===
    op.create_table(
        'user_organisations',
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('organisation_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('organisations.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('role', sa.Enum('ADMIN', 'VIEWER', name='user_role'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    # === PROPERTIES ===
    op.create_table(
        'properties',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _org_fk(),
        sa.Column('address', sa.String(255), nullable=False),
        sa.Column('postcode', sa.String(20), nullable=False),
        sa.Column('property_value', sa.Float(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('property_value > 0', name='ck_property_value_positive'),
    )

    # === PROPERTY VALUATIONS ===
    op.create_table(
        'property_valuations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _org_fk(),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('valuation_date', sa.Date(), nullable=False),
        sa.Column('estimated_value', sa.Float(), nullable=False),
        sa.Column('value_change_percent', sa.Float(), nullable=True),
        sa.Column('hpi_index', sa.Float(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )

    # === TENANTS ===
    op.create_table(
        'tenants',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _org_fk(),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('move_in_date', sa.Date(), nullable=False),
        sa.Column('current_equity_percentage', sa.Float(), nullable=False, server_default='25'),
        sa.Column('monthly_rent', sa.Float(), nullable=False),
        sa.Column('monthly_mortgage', sa.Float(), nullable=False),
        sa.Column('monthly_service_charge', sa.Float(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            'current_equity_percentage >= 0 AND current_equity_percentage <= 100',
            name='ck_tenant_equity_range',
        ),
    )

    # === STAIRCASING APPLICATIONS ===
    op.create_table(
        'staircasing_applications',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _org_fk(),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('equity_percentage_requested', sa.Float(), nullable=False),
        sa.Column('estimated_cost', sa.Float(), nullable=False),
        sa.Column('status', sa.Enum('PENDING', 'APPROVED', 'COMPLETED', 'REJECTED', name='staircasing_status'), nullable=False, index=True),
        sa.Column('application_date', sa.DateTime(), nullable=False),
        sa.Column('approved_date', sa.DateTime(), nullable=True),
        sa.Column('completed_date', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )

    # === MARKETING CAMPAIGNS ===
    op.create_table(
        'marketing_campaigns',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _org_fk(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('DRAFT', 'ACTIVE', 'PAUSED', 'COMPLETED', name='campaign_status'), nullable=False),
        sa.Column('target_segment', postgresql.JSONB(), nullable=True),
        sa.Column('email_template', sa.Text(), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=True),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column('total_sent', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_opened', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_clicked', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_converted', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )

    # === CAMPAIGN TRIGGERS ===
    op.create_table(
        'campaign_triggers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _org_fk(),
        sa.Column('campaign_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('marketing_campaigns.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column(
            'trigger_type',
            sa.Enum('EQUITY_THRESHOLD', 'MOVE_IN_ANNIVERSARY', 'PROPERTY_VALUE_INCREASE', 'MANUAL', name='trigger_type'),
            nullable=False,
        ),
        sa.Column('trigger_conditions', postgresql.JSONB(), nullable=False),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('last_triggered_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )

    # === SERVICE PROVIDERS ===
    op.create_table(
        'service_providers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _org_fk(),
        sa.Column(
            'provider_type',
            sa.Enum('BROKER', 'SURVEYOR', 'VALUER', 'CONVEYANCER', 'SOLICITOR', name='provider_type'),
            nullable=False,
            index=True,
        ),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('contact_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('website', sa.String(255), nullable=True),
        sa.Column('specializations', postgresql.JSONB(), nullable=True),
        sa.Column('is_preferred', sa.Boolean(), default=False),
        sa.Column('average_rating', sa.Float(), nullable=True),
        sa.Column('total_referrals', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )

    # === RESIDENT FEEDBACK ===
    op.create_table(
        'resident_feedback',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _org_fk(),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('nps_score', sa.Integer(), nullable=True),
        sa.Column('satisfaction_score', sa.Integer(), nullable=True),
        sa.Column('feedback_text', sa.Text(), nullable=True),
        sa.Column('category', sa.String(50), nullable=True),
        sa.Column('sentiment', sa.Enum('POSITIVE', 'NEUTRAL', 'NEGATIVE', name='sentiment'), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('nps_score IS NULL OR (nps_score >= 0 AND nps_score <= 10)', name='ck_feedback_nps'),
        sa.CheckConstraint(
            'satisfaction_score IS NULL OR (satisfaction_score >= 1 AND satisfaction_score <= 5)',
            name='ck_feedback_satisfaction',
        ),
    )

    # === FINANCIAL INSIGHTS ===
    op.create_table(
        'financial_insights',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _org_fk(),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('readiness_score', sa.Integer(), nullable=False),
        sa.Column('equity_growth_potential', sa.Float(), nullable=True),
        sa.Column('estimated_monthly_savings', sa.Float(), nullable=True),
        sa.Column('recommended_action', sa.String(50), nullable=True),
        sa.Column('factors', postgresql.JSONB(), nullable=True),
        sa.Column('calculated_at', sa.DateTime(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table('financial_insights')
    op.drop_table('resident_feedback')
    op.drop_table('service_providers')
    op.drop_table('campaign_triggers')
    op.drop_table('marketing_campaigns')
    op.drop_table('staircasing_applications')
    op.drop_table('tenants')
    op.drop_table('property_valuations')
    op.drop_table('properties')
    op.drop_table('user_organisations')
    op.drop_table('organisations')
    op.drop_table('users')

    for enum_name in ('sentiment', 'provider_type', 'trigger_type', 'campaign_status', 'staircasing_status', 'user_role'):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
