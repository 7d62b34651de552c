"""Initial schema: companies, funding rounds, investors, team, acquisitions,
portfolio and data source sync log

Revision ID: 20250101_initial_schema
Revises:
Create Date: 2025-01-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20250101_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('founded_year', sa.Integer(), nullable=True),
        sa.Column('headquarters', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('primary_category', sa.String(), nullable=True),
        sa.Column('secondary_categories_json', sa.String(), nullable=True),
        sa.Column('target_market', sa.String(), nullable=True),
        sa.Column('core_technology', sa.String(), nullable=True),
        sa.Column('total_funding', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('funding_rounds_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_funding_date', sa.Date(), nullable=True),
        sa.Column('current_stage', sa.String(), nullable=True),
        sa.Column('employee_count', sa.Integer(), nullable=True),
        sa.Column('estimated_revenue', sa.BigInteger(), nullable=True),
        sa.Column('growth_rate', sa.Float(), nullable=True),
        sa.Column('patents_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('market_cap', sa.BigInteger(), nullable=True),
        sa.Column('competitors_json', sa.String(), nullable=True),
        sa.Column('is_portfolio', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('website'),
    )
    op.create_index('ix_companies_name', 'companies', ['name'], unique=True)
    op.create_index('ix_companies_country', 'companies', ['country'])
    op.create_index('ix_companies_primary_category', 'companies', ['primary_category'])
    op.create_index('ix_companies_current_stage', 'companies', ['current_stage'])
    op.create_index('ix_companies_is_portfolio', 'companies', ['is_portfolio'])

    op.create_table(
        'investors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('normalized_name', sa.String(), nullable=False),
        sa.Column('investor_type', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('stage_focus_json', sa.String(), nullable=True),
        sa.Column('check_size', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_investors_name', 'investors', ['name'], unique=True)
    op.create_index('ix_investors_normalized_name', 'investors', ['normalized_name'])

    op.create_table(
        'funding_rounds',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=False),
        sa.Column('content_hash', sa.String(64), nullable=True),
        sa.Column('round_type', sa.String(), nullable=False),
        sa.Column('amount_usd', sa.BigInteger(), nullable=True),
        sa.Column('valuation_usd', sa.BigInteger(), nullable=True),
        sa.Column('announced_date', sa.Date(), nullable=True),
        sa.Column('lead_investor', sa.String(), nullable=True),
        sa.Column('source', sa.String(), nullable=True),
        sa.Column('source_url', sa.String(), nullable=True),
        sa.Column('confidence', sa.Float(), nullable=False, server_default='1.0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id']),
    )
    op.create_index('ix_funding_rounds_company_id', 'funding_rounds', ['company_id'])
    op.create_index('ix_funding_rounds_content_hash', 'funding_rounds', ['content_hash'], unique=True)
    op.create_index('ix_funding_rounds_round_type', 'funding_rounds', ['round_type'])
    op.create_index('ix_funding_rounds_announced_date', 'funding_rounds', ['announced_date'])
    op.create_index('ix_funding_rounds_source', 'funding_rounds', ['source'])
    op.create_index('ix_funding_rounds_source_url', 'funding_rounds', ['source_url'])
    op.create_index('ix_funding_rounds_created_at', 'funding_rounds', ['created_at'])

    op.create_table(
        'funding_round_investors',
        sa.Column('round_id', sa.Integer(), nullable=False),
        sa.Column('investor_id', sa.Integer(), nullable=False),
        sa.Column('is_lead', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint('round_id', 'investor_id'),
        sa.ForeignKeyConstraint(['round_id'], ['funding_rounds.id']),
        sa.ForeignKeyConstraint(['investor_id'], ['investors.id']),
    )

    op.create_table(
        'team_members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('linkedin_url', sa.String(), nullable=True),
        sa.Column('is_founder', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id']),
    )
    op.create_index('ix_team_members_company_id', 'team_members', ['company_id'])

    op.create_table(
        'acquisitions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=False),
        sa.Column('acquirer_name', sa.String(), nullable=False),
        sa.Column('amount_usd', sa.BigInteger(), nullable=True),
        sa.Column('announced_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='announced'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id']),
    )
    op.create_index('ix_acquisitions_company_id', 'acquisitions', ['company_id'])

    op.create_table(
        'portfolio_companies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=False),
        sa.Column('investment_date', sa.Date(), nullable=True),
        sa.Column('investment_amount', sa.BigInteger(), nullable=True),
        sa.Column('ownership_percentage', sa.Float(), nullable=True),
        sa.Column('traction_score', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('active_users', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id']),
    )
    op.create_index('ix_portfolio_companies_company_id', 'portfolio_companies', ['company_id'], unique=True)
    op.create_index('ix_portfolio_companies_status', 'portfolio_companies', ['status'])

    op.create_table(
        'data_source_syncs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('source_id', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='success'),
        sa.Column('records_processed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('new_records', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_records', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('errors', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('duration_ms', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('started_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_data_source_syncs_source_id', 'data_source_syncs', ['source_id'])
    op.create_index('ix_data_source_syncs_started_at', 'data_source_syncs', ['started_at'])


def downgrade() -> None:
    op.drop_table('data_source_syncs')
    op.drop_table('portfolio_companies')
    op.drop_table('acquisitions')
    op.drop_table('team_members')
    op.drop_table('funding_round_investors')
    op.drop_table('funding_rounds')
    op.drop_table('investors')
    op.drop_table('companies')
