"""Dashboards and progress analytics."""

from __future__ import annotations

from flask import Blueprint

from fitcoach.api.deps import current_context, json_response, reporting_config, require_role, timing
from fitcoach.models.user import ROLE_CLIENT, ROLE_COACH
from fitcoach.schemas import (
    ClientDashboardSchema,
    ClientHistorySchema,
    CoachDashboardSchema,
    ProgressReportSchema,
)
from fitcoach.services.reporting import ReportingService

bp = Blueprint("reporting", __name__)

client_dashboard_schema = ClientDashboardSchema()
coach_dashboard_schema = CoachDashboardSchema()
progress_schema = ProgressReportSchema()
history_schema = ClientHistorySchema()


@bp.get("/client/dashboard")
@require_role(ROLE_CLIENT)
@timing
def client_dashboard():
    """Totals, completion vs. the fixed window and recent logs for a client."""

    report = ReportingService(reporting_config()).client_dashboard(current_context())
    return json_response({"data": client_dashboard_schema.dump(report)})


@bp.get("/progress")
@require_role(ROLE_CLIENT)
@timing
def progress():
    """Workout volume and nutrition analytics for the calling client."""

    report = ReportingService(reporting_config()).progress(current_context())
    return json_response({"data": progress_schema.dump(report)})


@bp.get("/coach/dashboard")
@require_role(ROLE_COACH)
@timing
def coach_dashboard():
    """Per-client progress, aggregate stats and the program type histogram."""

    report = ReportingService(reporting_config()).coach_dashboard(current_context())
    return json_response({"data": coach_dashboard_schema.dump(report)})


@bp.get("/coach/clients/<int:client_id>/history")
@require_role(ROLE_COACH)
@timing
def client_history(client_id: int):
    report = ReportingService(reporting_config()).client_history(current_context(), client_id)
    return json_response({"data": history_schema.dump(report)})
