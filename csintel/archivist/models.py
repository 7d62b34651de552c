"""
Database models using SQLModel (SQLAlchemy + Pydantic).

Schema:
- Company: Cybersecurity startups tracked by the platform
- FundingRound: Individual funding rounds for a company
- Investor: VC firms and angels seen on funding rounds
- FundingRoundInvestor: Join table linking rounds to investors with lead flag
- TeamMember: Founders and executives of a company
- Acquisition: M&A events where a tracked company was acquired
- PortfolioCompany: Companies held in the fund's own portfolio
- DataSourceSync: Sync log for external data sources
"""

from datetime import datetime, date, timezone
from typing import Optional, List
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, BigInteger


def utc_now_naive() -> datetime:
    """Return current UTC time as timezone-naive datetime.

    PostgreSQL TIMESTAMP WITHOUT TIME ZONE columns require naive datetimes.
    Using timezone-aware datetimes causes asyncpg DataError.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Company(SQLModel, table=True):
    """A cybersecurity startup."""
    __tablename__ = "companies"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)
    description: Optional[str] = None
    founded_year: Optional[int] = None
    headquarters: Optional[str] = None
    country: Optional[str] = Field(default=None, index=True)
    website: Optional[str] = Field(default=None, unique=True)

    # Classification
    primary_category: Optional[str] = Field(default=None, index=True)
    secondary_categories_json: Optional[str] = None  # JSON: ["Cloud Security", ...]
    target_market: Optional[str] = None
    core_technology: Optional[str] = None

    # Funding summary (kept in sync by save_funding_round)
    total_funding: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))
    funding_rounds_count: int = 0
    last_funding_date: Optional[date] = None
    current_stage: Optional[str] = Field(default=None, index=True)

    # Company metrics
    employee_count: Optional[int] = None
    estimated_revenue: Optional[int] = Field(default=None, sa_column=Column(BigInteger))
    growth_rate: Optional[float] = None
    patents_count: int = 0
    market_cap: Optional[int] = Field(default=None, sa_column=Column(BigInteger))
    competitors_json: Optional[str] = None  # JSON: ["CrowdStrike", ...]

    is_portfolio: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)

    # Relationships
    funding_rounds: List["FundingRound"] = Relationship(
        back_populates="company",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    team_members: List["TeamMember"] = Relationship(
        back_populates="company",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    acquisitions: List["Acquisition"] = Relationship(
        back_populates="company",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )


class FundingRound(SQLModel, table=True):
    """A funding round."""
    __tablename__ = "funding_rounds"

    id: Optional[int] = Field(default=None, primary_key=True)
    company_id: int = Field(foreign_key="companies.id", index=True)

    # sha256 of normalized company|amount|round|date; unique to block exact re-imports
    content_hash: Optional[str] = Field(default=None, max_length=64, index=True, unique=True)

    round_type: str = Field(index=True)  # Seed, Series A, ...
    amount_usd: Optional[int] = Field(default=None, sa_column=Column(BigInteger))
    valuation_usd: Optional[int] = Field(default=None, sa_column=Column(BigInteger))
    announced_date: Optional[date] = Field(default=None, index=True)
    lead_investor: Optional[str] = None

    # Provenance
    source: Optional[str] = Field(default=None, index=True)  # manual, seed, crunchbase, article...
    source_url: Optional[str] = Field(default=None, index=True)
    confidence: float = 1.0

    created_at: datetime = Field(default_factory=utc_now_naive, index=True)

    # Relationships
    company: Company = Relationship(back_populates="funding_rounds")
    investors: List["FundingRoundInvestor"] = Relationship(
        back_populates="funding_round",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )


class Investor(SQLModel, table=True):
    """A VC firm or angel investor."""
    __tablename__ = "investors"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)
    normalized_name: str = Field(index=True)
    investor_type: Optional[str] = None  # VC Firm, Angel, Corporate
    location: Optional[str] = None
    website: Optional[str] = None
    stage_focus_json: Optional[str] = None  # JSON: ["Seed", "Series A"]
    check_size: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now_naive)

    rounds: List["FundingRoundInvestor"] = Relationship(back_populates="investor")


class FundingRoundInvestor(SQLModel, table=True):
    """Join table: which investors participated in which rounds."""
    __tablename__ = "funding_round_investors"

    round_id: int = Field(foreign_key="funding_rounds.id", primary_key=True)
    investor_id: int = Field(foreign_key="investors.id", primary_key=True)
    is_lead: bool = False

    funding_round: FundingRound = Relationship(back_populates="investors")
    investor: Investor = Relationship(back_populates="rounds")


class TeamMember(SQLModel, table=True):
    """A founder or executive at a company."""
    __tablename__ = "team_members"

    id: Optional[int] = Field(default=None, primary_key=True)
    company_id: int = Field(foreign_key="companies.id", index=True)
    name: str
    title: Optional[str] = None
    linkedin_url: Optional[str] = None
    is_founder: bool = False
    created_at: datetime = Field(default_factory=utc_now_naive)

    company: Company = Relationship(back_populates="team_members")


class Acquisition(SQLModel, table=True):
    """An acquisition of a tracked company."""
    __tablename__ = "acquisitions"

    id: Optional[int] = Field(default=None, primary_key=True)
    company_id: int = Field(foreign_key="companies.id", index=True)
    acquirer_name: str
    amount_usd: Optional[int] = Field(default=None, sa_column=Column(BigInteger))
    announced_date: Optional[date] = None
    status: str = "announced"  # announced, completed, cancelled
    created_at: datetime = Field(default_factory=utc_now_naive)

    company: Company = Relationship(back_populates="acquisitions")


class PortfolioCompany(SQLModel, table=True):
    """A company held in the portfolio."""
    __tablename__ = "portfolio_companies"

    id: Optional[int] = Field(default=None, primary_key=True)
    company_id: int = Field(foreign_key="companies.id", unique=True, index=True)
    investment_date: Optional[date] = None
    investment_amount: Optional[int] = Field(default=None, sa_column=Column(BigInteger))
    ownership_percentage: Optional[float] = None
    traction_score: int = 50  # 0-100
    active_users: int = 0
    status: str = Field(default="active", index=True)  # active, exited, written_off
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive)


class DataSourceSync(SQLModel, table=True):
    """One sync run against an external data source."""
    __tablename__ = "data_source_syncs"

    id: Optional[int] = Field(default=None, primary_key=True)
    source_id: str = Field(index=True)
    status: str = "success"  # success, failed
    records_processed: int = 0
    new_records: int = 0
    updated_records: int = 0
    errors: int = 0
    duration_ms: int = 0
    started_at: datetime = Field(default_factory=utc_now_naive, index=True)
    completed_at: Optional[datetime] = None
