"""Dashboards and progress analytics."""

from __future__ import annotations

from .dto import (
    ClientDashboardOut,
    ClientHistoryOut,
    CoachDashboardOut,
    ProgressReportOut,
    ReportingConfig,
)
from .service import ReportingService, workout_volume

__all__ = [
    "ReportingService",
    "ReportingConfig",
    "ClientDashboardOut",
    "ClientHistoryOut",
    "CoachDashboardOut",
    "ProgressReportOut",
    "workout_volume",
]
