from .analysis import router as analysis_router
from .companies import router as companies_router
from .dashboard import router as dashboard_router
from .data_sources import router as data_sources_router
from .funding import router as funding_router
from .ingestion import router as ingestion_router
from .secure_data import router as secure_data_router

ALL_ROUTERS = [
    dashboard_router,
    companies_router,
    funding_router,
    data_sources_router,
    ingestion_router,
    analysis_router,
    secure_data_router,
]

__all__ = [
    "ALL_ROUTERS",
    "analysis_router",
    "companies_router",
    "dashboard_router",
    "data_sources_router",
    "funding_router",
    "ingestion_router",
    "secure_data_router",
]
