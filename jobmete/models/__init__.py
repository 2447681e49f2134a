"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from jobmete.models.user import User
from jobmete.models.company import Company
from jobmete.models.event import Event
from jobmete.models.trend import TrendSummary

# Export all models
__all__ = [
    "User",
    "Company",
    "Event",
    "TrendSummary",
]
