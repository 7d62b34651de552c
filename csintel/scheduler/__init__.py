"""
Scheduler module for automated data source syncs.
"""
from .jobs import setup_scheduler, shutdown_scheduler, scheduler

__all__ = ["setup_scheduler", "shutdown_scheduler", "scheduler"]
