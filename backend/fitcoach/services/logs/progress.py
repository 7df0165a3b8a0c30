"""Folding a logged workout into an enrollment's progress record."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any

from fitcoach.models.base import as_utc


def _parse_day(value: Any) -> date | None:
    if not value:
        return None
    try:
        return as_utc(datetime.fromisoformat(str(value))).date()
    except ValueError:
        return None


def next_streak(previous_day: date | None, current_streak: int, day: date) -> int:
    """
    Consecutive calendar days with at least one workout.

    A second workout on the same day keeps the streak, the next day extends
    it, a gap restarts it at 1. Backdated logs never shorten it.
    """
    if previous_day is None:
        return 1
    if day == previous_day:
        return max(current_streak, 1)
    if day == previous_day + timedelta(days=1):
        return current_streak + 1
    if day < previous_day:
        return max(current_streak, 1)
    return 1


def fold_workout(
    progress: dict[str, Any] | None,
    *,
    routine_id: int | str,
    at: datetime,
    note: str | None = None,
) -> dict[str, Any]:
    """
    Return a new progress dict with one workout folded in.

    - ``completed`` gains ``str(routine_id)`` unless already present.
    - A non-empty ``note`` appends ``{date, routine_id, note}`` to ``notes``.
    - ``last_workout`` moves forward only; ``streak`` follows :func:`next_streak`.

    The input is never mutated.
    """
    current = dict(progress or {})
    completed = list(current.get("completed") or [])
    notes = list(current.get("notes") or [])
    at = as_utc(at)

    key = str(routine_id)
    if key not in completed:
        completed.append(key)
    if note:
        notes.append({"date": at.isoformat(), "routine_id": routine_id, "note": note})

    previous_day = _parse_day(current.get("last_workout"))
    streak = next_streak(previous_day, int(current.get("streak") or 0), at.date())
    last_workout = current.get("last_workout")
    if previous_day is None or at.date() >= previous_day:
        last_workout = at.isoformat()

    current.update(completed=completed, notes=notes, last_workout=last_workout, streak=streak)
    return current
