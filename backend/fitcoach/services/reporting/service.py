from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

from fitcoach.models.base import as_utc
from fitcoach.models.logs import WorkoutLog
from fitcoach.models.program import PROGRAM_TYPES
from fitcoach.models.user import ROLE_CLIENT, ROLE_COACH
from fitcoach.services._shared.base import (
    BaseService,
    ServiceContext,
    display_name,
    round_half_up,
)
from fitcoach.services._shared.errors import NotFoundError
from fitcoach.services.logs._converters import meal_log_to_out, workout_log_to_out

from .dto import (
    CaloriesPointOut,
    ClientDashboardOut,
    ClientHistoryOut,
    ClientStatsOut,
    CoachClientOut,
    CoachDashboardOut,
    CoachStatsOut,
    NutritionStatsOut,
    ProgressReportOut,
    ReportingConfig,
    WorkoutStatsOut,
)

logger = logging.getLogger(__name__)


def _number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def workout_volume(log: WorkoutLog) -> float:
    """Σ weight × reps over every set of every exercise entry of ``log``."""
    total = 0.0
    for entry in (log.data or {}).get("exercise_logs") or []:
        for s in entry.get("sets") or []:
            total += _number(s.get("weight")) * _number(s.get("reps"))
    return total


def _average(total: float, count: int, ndigits: int = 0) -> float:
    return round_half_up(total / count, ndigits) if count else 0


def _newest_first(row: Any) -> tuple[datetime | None, int]:
    return as_utc(row.date), row.id


class ReportingService(BaseService):
    """
    Read-only statistics derived from logs at request time.

    Nothing is stored: every figure is recomputed on each call. The client
    dashboard measures progress against a fixed window
    (``progress_vs_30_days``) while the coach dashboard uses each program's
    ``cycle_length`` (``progress_vs_cycle_length``); the two are kept apart.
    """

    def __init__(self, cfg: ReportingConfig | None = None) -> None:
        super().__init__()
        self.cfg = cfg or ReportingConfig()

    # ------------------------------------------------------------------ #
    # Client side
    # ------------------------------------------------------------------ #

    def client_dashboard(self, ctx: ServiceContext) -> ClientDashboardOut:
        self.require_role(ctx, ROLE_CLIENT, msg="Only clients have a client dashboard.")
        with self.ro_uow() as uow:
            total_workouts = uow.workout_logs.count_for_client(ctx.actor_id)
            meals = uow.meal_logs.macro_totals(ctx.actor_id)
            active = uow.enrollments.list_for_client(ctx.actor_id, active_only=True)
            recent_workouts = uow.workout_logs.for_client(ctx.actor_id, limit=self.cfg.recent_limit)
            recent_meals = uow.meal_logs.for_client(ctx.actor_id, limit=self.cfg.recent_limit)

            stats = ClientStatsOut(
                total_workouts=total_workouts,
                average_calories=int(_average(meals["calories"], meals["count"])),
                progress_vs_30_days=int(
                    round_half_up(100 * total_workouts / max(self.cfg.progress_window, 1))
                ),
                active_programs=len(active),
            )
            return ClientDashboardOut(
                stats=stats,
                recent_workouts=[workout_log_to_out(r) for r in recent_workouts],
                recent_meals=[meal_log_to_out(r) for r in recent_meals],
            )

    def progress(self, ctx: ServiceContext, *, now: datetime | None = None) -> ProgressReportOut:
        """Volume and nutrition analytics over all of the caller's logs."""
        self.require_role(ctx, ROLE_CLIENT, msg="Only clients have progress analytics.")
        now = now or datetime.now(UTC)
        week_ago = now - timedelta(days=7)

        with self.ro_uow() as uow:
            workouts = uow.workout_logs.for_client(ctx.actor_id)
            meals = uow.meal_logs.for_client(ctx.actor_id)

            volumes = [(as_utc(w.date), workout_volume(w)) for w in workouts]
            workout_stats = WorkoutStatsOut(
                total_workouts=len(workouts),
                average_volume=_average(sum(v for _, v in volumes), len(volumes), 2),
                last_week_volume=round_half_up(
                    sum(v for day, v in volumes if day is not None and day >= week_ago), 2
                ),
            )

            trend = [
                CaloriesPointOut(date=as_utc(m.date), calories=int(m.calories or 0))
                for m in reversed(meals[: self.cfg.trend_limit])
            ]
            nutrition = NutritionStatsOut(
                total_meals=len(meals),
                average_calories=int(_average(sum(m.calories or 0 for m in meals), len(meals))),
                average_protein=int(_average(sum(m.protein or 0 for m in meals), len(meals))),
                calories_trend=trend,
            )
            return ProgressReportOut(
                workout=workout_stats,
                nutrition=nutrition,
                recent_workouts=[workout_log_to_out(w) for w in workouts[: self.cfg.recent_limit]],
                recent_meals=[meal_log_to_out(m) for m in meals[: self.cfg.recent_limit]],
            )

    # ------------------------------------------------------------------ #
    # Coach side
    # ------------------------------------------------------------------ #

    def coach_dashboard(self, ctx: ServiceContext) -> CoachDashboardOut:
        """
        Per-enrollment completion for every active client of the coach.

        :raises AuthorizationError: If the caller is not a coach.
        """
        self.require_role(ctx, ROLE_COACH, msg="Only coaches have a coach dashboard.")
        with self.ro_uow() as uow:
            programs = uow.programs.list_by_coach(ctx.actor_id)
            by_id = {p.id: p for p in programs}
            enrollments = uow.enrollments.list_active_for_programs(by_id)
            counts = uow.workout_logs.count_by_enrollment(e.id for e in enrollments)

            clients: list[CoachClientOut] = []
            for enrollment in enrollments:
                program = by_id[enrollment.program_id]
                workouts = counts.get(enrollment.id, 0)
                cycle = max(int(program.cycle_length or 0), 1)
                clients.append(
                    CoachClientOut(
                        client_id=enrollment.client_id,
                        display_name=display_name(enrollment.client),
                        enrollment_id=enrollment.id,
                        program_id=program.id,
                        program_name=program.name,
                        program_type=program.type,
                        start_date=as_utc(enrollment.start_date),
                        workouts_logged=workouts,
                        progress_vs_cycle_length=int(round_half_up(100 * workouts / cycle)),
                        workout_frequency=round_half_up(workouts / cycle, 2),
                        last_workout=enrollment.progress.get("last_workout"),
                    )
                )

            return CoachDashboardOut(
                clients=clients,
                stats=CoachStatsOut(
                    total_clients=len({c.client_id for c in clients}),
                    active_programs=sum(1 for p in programs if p.status == "active"),
                    total_programs=len(programs),
                    active_enrollments=len(clients),
                ),
                program_types=self._type_histogram(p.type for p in programs),
            )

    def client_history(self, ctx: ServiceContext, client_id: int) -> ClientHistoryOut:
        """
        Logs of a client, limited to enrollments in the caller's programs.

        :raises NotFoundError: If the client holds no enrollment with this coach.
        """
        self.require_role(ctx, ROLE_COACH, msg="Only coaches can read client history.")
        with self.ro_uow() as uow:
            if not uow.enrollments.client_is_coached_by(client_id, ctx.actor_id):
                raise NotFoundError("Client", client_id)
            client = uow.users.get(client_id)

            workouts: list[WorkoutLog] = []
            meals = []
            for enrollment in uow.enrollments.list_for_client(client_id):
                if enrollment.program.coach_id != ctx.actor_id:
                    continue
                workouts.extend(uow.workout_logs.history(client_id, enrollment.id))
                meals.extend(uow.meal_logs.history(client_id, enrollment.id))

            workouts.sort(key=_newest_first, reverse=True)
            meals.sort(key=_newest_first, reverse=True)
            logger.info(
                "Client history read",
                extra={"coach_id": ctx.actor_id, "client_id": client_id},
            )
            return ClientHistoryOut(
                client_id=client_id,
                display_name=display_name(client),
                workouts=[workout_log_to_out(w) for w in workouts],
                meals=[meal_log_to_out(m) for m in meals],
            )

    @staticmethod
    def _type_histogram(types: Iterable[str]) -> dict[str, int]:
        histogram = {t: 0 for t in PROGRAM_TYPES}
        for t in types:
            histogram[t] = histogram.get(t, 0) + 1
        return histogram
