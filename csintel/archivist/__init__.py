"""Database models and storage utilities."""

from .models import (
    Company,
    FundingRound,
    Investor,
    FundingRoundInvestor,
    TeamMember,
    Acquisition,
    PortfolioCompany,
    DataSourceSync,
)
from .database import get_session, get_db, init_db, close_db
from .storage import save_funding_round, list_funding_rounds, list_companies
from .seed import seed_database

__all__ = [
    "Company",
    "FundingRound",
    "Investor",
    "FundingRoundInvestor",
    "TeamMember",
    "Acquisition",
    "PortfolioCompany",
    "DataSourceSync",
    "get_session",
    "get_db",
    "init_db",
    "close_db",
    "save_funding_round",
    "list_funding_rounds",
    "list_companies",
    "seed_database",
]
