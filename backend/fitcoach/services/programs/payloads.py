"""Type-specific program payloads and their validators.

A program's ``type`` selects exactly one payload shape:

- ``lifting`` → ordered routines, each with ordered exercises,
- ``diet`` → a list of meal plans,
- ``posing`` → a single posing plan.

Validators raise :class:`ValidationFailedError` listing every failing field
path (``meal_plans.0.target_calories``). Readers go through
:func:`select_payload`, which ignores whatever sibling payload may still sit
in storage.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import Any, Union

from marshmallow import EXCLUDE, Schema, fields, post_load, validate
from marshmallow import ValidationError as MarshmallowValidationError

from fitcoach.models.program import (
    PROGRAM_TYPE_DIET,
    PROGRAM_TYPE_LIFTING,
    PROGRAM_TYPE_POSING,
    PROGRAM_TYPES,
)
from fitcoach.services._shared.errors import ValidationFailedError

PAYLOAD_SCHEMA_VERSION = 1
COMMUNICATION_PREFERENCES = ("email", "chat", "video")


# ------------------------------ Strict fields ------------------------------ #


class StrictNumber(fields.Number):
    """Accept only JSON numbers; strings and booleans are type mismatches."""

    num_type = float

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise self.make_error("invalid")
        return super()._deserialize(value, attr, data, **kwargs)


class StrictInteger(fields.Integer):
    """Integer field that also rejects booleans."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(strict=True, **kwargs)

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, bool):
            raise self.make_error("invalid")
        return super()._deserialize(value, attr, data, **kwargs)


class Identifier(fields.Field):
    """Client-visible identifier: a non-negative integer or a non-empty string."""

    default_error_messages = {"invalid": "Not a valid identifier."}

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, bool):
            raise self.make_error("invalid")
        if isinstance(value, int) and value >= 0:
            return value
        if isinstance(value, str) and value.strip():
            return value.strip()
        raise self.make_error("invalid")


class LooseText(fields.Field):
    """Free text that may arrive as a number (``rest_time: 90``); stored as ``str``."""

    default_error_messages = {"invalid": "Not a valid string or number."}

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, bool):
            raise self.make_error("invalid")
        if isinstance(value, int | float):
            return str(value)
        if isinstance(value, str):
            return value
        raise self.make_error("invalid")


# ------------------------------ Value objects ------------------------------- #


@dataclass(frozen=True, slots=True)
class MealPlan:
    meal_name: str
    target_calories: float
    target_protein: float
    target_carbs: float
    target_fats: float
    notes: str
    food_suggestions: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class PosingPlan:
    bio: str
    details: str
    communication_preference: str


@dataclass(frozen=True, slots=True)
class ExerciseSpec:
    id: int | str
    name: str
    sets: int
    reps: str
    order_in_routine: int
    description: str | None = None
    rest_time: str | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class RoutineSpec:
    id: int | str
    name: str
    order_in_cycle: int
    exercises: tuple[ExerciseSpec, ...]
    day_of_week: str | None = None
    notes: str | None = None

    def find_exercise(self, exercise_id: int | str) -> ExerciseSpec | None:
        wanted = str(exercise_id)
        return next((ex for ex in self.exercises if str(ex.id) == wanted), None)


@dataclass(frozen=True, slots=True)
class ExerciseDraft:
    """Exercise as authored on create/update; ids and positions are assigned on insert."""

    name: str
    sets: int
    reps: str
    description: str | None = None
    rest_time: str | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class WorkoutDayDraft:
    name: str
    exercises: tuple[ExerciseDraft, ...] = ()
    day_of_week: str | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class LiftingPayload:
    routines: tuple[RoutineSpec, ...]
    type: str = PROGRAM_TYPE_LIFTING


@dataclass(frozen=True, slots=True)
class DietPayload:
    meal_plans: tuple[MealPlan, ...]
    type: str = PROGRAM_TYPE_DIET


@dataclass(frozen=True, slots=True)
class PosingPayload:
    posing_plan: PosingPlan | None
    type: str = PROGRAM_TYPE_POSING


ProgramPayload = Union[LiftingPayload, DietPayload, PosingPayload]


# -------------------------------- Schemas ---------------------------------- #


class _PayloadSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class MealPlanSchema(_PayloadSchema):
    meal_name = fields.String(required=True)
    target_calories = StrictNumber(required=True)
    target_protein = StrictNumber(required=True)
    target_carbs = StrictNumber(required=True)
    target_fats = StrictNumber(required=True)
    notes = fields.String(required=True)
    food_suggestions = fields.List(fields.String(), required=True)

    @post_load
    def _build(self, data: dict[str, Any], **_: Any) -> MealPlan:
        data["food_suggestions"] = tuple(data["food_suggestions"])
        return MealPlan(**data)


class PosingPlanSchema(_PayloadSchema):
    bio = fields.String(required=True)
    details = fields.String(required=True)
    communication_preference = fields.String(
        required=True, validate=validate.OneOf(COMMUNICATION_PREFERENCES)
    )

    @post_load
    def _build(self, data: dict[str, Any], **_: Any) -> PosingPlan:
        return PosingPlan(**data)


class ExerciseSpecSchema(_PayloadSchema):
    id = Identifier(required=True)
    name = fields.String(required=True)
    sets = StrictInteger(required=True, validate=validate.Range(min=1))
    reps = fields.String(required=True)
    order_in_routine = StrictInteger(required=True)
    description = fields.String(allow_none=True, load_default=None)
    rest_time = LooseText(allow_none=True, load_default=None)
    notes = fields.String(allow_none=True, load_default=None)

    @post_load
    def _build(self, data: dict[str, Any], **_: Any) -> ExerciseSpec:
        return ExerciseSpec(**data)


class RoutineSpecSchema(_PayloadSchema):
    id = Identifier(required=True)
    name = fields.String(required=True)
    order_in_cycle = StrictInteger(required=True)
    exercises = fields.List(fields.Nested(ExerciseSpecSchema), required=True)
    day_of_week = fields.String(allow_none=True, load_default=None)
    notes = fields.String(allow_none=True, load_default=None)

    @post_load
    def _build(self, data: dict[str, Any], **_: Any) -> RoutineSpec:
        data["exercises"] = tuple(data["exercises"])
        return RoutineSpec(**data)


class ExerciseDraftSchema(_PayloadSchema):
    name = fields.String(required=True, validate=validate.Length(min=1))
    sets = StrictInteger(required=True, validate=validate.Range(min=1))
    reps = LooseText(required=True)
    description = fields.String(allow_none=True, load_default=None)
    rest_time = LooseText(allow_none=True, load_default=None)
    notes = fields.String(allow_none=True, load_default=None)

    @post_load
    def _build(self, data: dict[str, Any], **_: Any) -> ExerciseDraft:
        return ExerciseDraft(**data)


class WorkoutDayDraftSchema(_PayloadSchema):
    name = fields.String(required=True, validate=validate.Length(min=1))
    exercises = fields.List(fields.Nested(ExerciseDraftSchema), load_default=list)
    day_of_week = fields.String(allow_none=True, load_default=None)
    notes = fields.String(allow_none=True, load_default=None)

    @post_load
    def _build(self, data: dict[str, Any], **_: Any) -> WorkoutDayDraft:
        data["exercises"] = tuple(data["exercises"])
        return WorkoutDayDraft(**data)


_meal_plan_schema = MealPlanSchema()
_posing_plan_schema = PosingPlanSchema()
_routine_schema = RoutineSpecSchema()
_workout_day_schema = WorkoutDayDraftSchema()


# ------------------------------- Validators -------------------------------- #


def _flatten(messages: Any, prefix: str = "") -> dict[str, list[str]]:
    """Flatten marshmallow's nested messages into ``{"a.0.b": [...]}``."""
    if isinstance(messages, Mapping):
        out: dict[str, list[str]] = {}
        for key, value in messages.items():
            name = prefix if key == "_schema" and prefix else str(key)
            path = name if not prefix or name == prefix else f"{prefix}.{name}"
            out.update(_flatten(value, path))
        return out
    if isinstance(messages, list | tuple):
        return {prefix or "_schema": [str(m) for m in messages]}
    return {prefix or "_schema": [str(messages)]}


def _load(schema: Schema, obj: Any, *, path: str, errors: dict[str, list[str]]) -> Any:
    try:
        return schema.load(obj)
    except MarshmallowValidationError as exc:
        errors.update(_flatten(exc.messages, path))
        return None


def _load_list(
    schema: Schema, items: Any, *, path: str, errors: dict[str, list[str]], required: bool
) -> list[Any]:
    if items is None:
        if required:
            errors[path] = ["Missing data for required field."]
        return []
    if not isinstance(items, list):
        errors[path] = ["Not a valid list."]
        return []
    loaded = [_load(schema, item, path=f"{path}.{i}", errors=errors) for i, item in enumerate(items)]
    return [item for item in loaded if item is not None]


def _raise_if(errors: dict[str, list[str]]) -> None:
    if errors:
        raise ValidationFailedError(errors)


def validate_meal_plan(obj: Any) -> MealPlan:
    """Validate one meal plan; every missing or mistyped field is reported."""
    errors: dict[str, list[str]] = {}
    plan = _load(_meal_plan_schema, obj, path="", errors=errors)
    _raise_if(errors)
    return plan


def validate_routine(obj: Any) -> RoutineSpec:
    """Validate a full routine including its exercises."""
    errors: dict[str, list[str]] = {}
    routine = _load(_routine_schema, obj, path="", errors=errors)
    _raise_if(errors)
    return routine


def validate_posing_plan(obj: Any) -> PosingPlan:
    errors: dict[str, list[str]] = {}
    plan = _load(_posing_plan_schema, obj, path="", errors=errors)
    _raise_if(errors)
    return plan


@dataclass(frozen=True, slots=True)
class ProgramDraftPayload:
    """Validated type-specific input of a create/update call."""

    type: str
    workout_days: tuple[WorkoutDayDraft, ...] | None = None
    meal_plans: tuple[MealPlan, ...] | None = None
    posing_plan: PosingPlan | None = None


def validate_program_payload(
    program_type: Any,
    *,
    workout_days: Any = None,
    meal_plans: Any = None,
    posing_plan: Any = None,
    partial: bool = False,
) -> ProgramDraftPayload:
    """
    Validate the payload matching ``program_type``; sibling payloads are dropped.

    With ``partial=False`` (create) diet programs need ``meal_plans`` and
    posing programs need ``posing_plan``. Lifting programs may start without
    workout days. ``partial=True`` (update) only validates what was sent.
    """
    errors: dict[str, list[str]] = {}
    if program_type not in PROGRAM_TYPES:
        errors["type"] = [f"Must be one of: {', '.join(PROGRAM_TYPES)}."]
        _raise_if(errors)

    if program_type == PROGRAM_TYPE_LIFTING:
        if workout_days is None:
            return ProgramDraftPayload(type=program_type)
        days = _load_list(
            _workout_day_schema, workout_days, path="workout_days", errors=errors, required=True
        )
        _raise_if(errors)
        return ProgramDraftPayload(type=program_type, workout_days=tuple(days))

    if program_type == PROGRAM_TYPE_DIET:
        if meal_plans is None and partial:
            return ProgramDraftPayload(type=program_type)
        plans = _load_list(
            _meal_plan_schema, meal_plans, path="meal_plans", errors=errors, required=True
        )
        if not errors and not plans:
            errors["meal_plans"] = ["At least one meal plan is required."]
        _raise_if(errors)
        return ProgramDraftPayload(type=program_type, meal_plans=tuple(plans))

    if posing_plan is None:
        if partial:
            return ProgramDraftPayload(type=program_type)
        errors["posing_plan"] = ["Missing data for required field."]
        _raise_if(errors)
    plan = _load(_posing_plan_schema, posing_plan, path="posing_plan", errors=errors)
    _raise_if(errors)
    return ProgramDraftPayload(type=program_type, posing_plan=plan)


_OVERRIDE_TYPES = {
    "routines": PROGRAM_TYPE_LIFTING,
    "meal_plans": PROGRAM_TYPE_DIET,
    "posing_details": PROGRAM_TYPE_POSING,
}


def validate_overrides(program_type: str, overrides: Mapping[str, Any]) -> dict[str, Any]:
    """
    Validate structural enrollment overrides against the program type.

    Only keys present in ``overrides`` are checked. An override for a payload
    the program type does not carry is rejected. Returns the JSON-ready values.
    """
    errors: dict[str, list[str]] = {}
    out: dict[str, Any] = {}
    for key, expected_type in _OVERRIDE_TYPES.items():
        if key not in overrides:
            continue
        if program_type != expected_type:
            errors[key] = [f"Not applicable to a {program_type} program."]
            continue
        value = overrides[key]
        if key == "routines":
            routines = _load_list(_routine_schema, value, path=key, errors=errors, required=True)
            orders = [r.order_in_cycle for r in routines]
            if len(orders) != len(set(orders)):
                errors.setdefault(key, []).append("order_in_cycle values must be unique.")
            out[key] = to_json(routines)
        elif key == "meal_plans":
            out[key] = to_json(
                _load_list(_meal_plan_schema, value, path=key, errors=errors, required=True)
            )
        else:
            out[key] = to_json(_load(_posing_plan_schema, value, path=key, errors=errors))
    _raise_if(errors)
    return out


# ------------------------------ Read side ---------------------------------- #


def meal_plans_from_data(items: Sequence[Mapping[str, Any]] | None) -> tuple[MealPlan, ...]:
    """Rebuild stored meal plans (already validated at write time)."""
    plans = []
    for item in items or ():
        data = dict(item)
        data["food_suggestions"] = tuple(data.get("food_suggestions") or ())
        plans.append(MealPlan(**{k: data.get(k) for k in MealPlan.__slots__}))
    return tuple(plans)


def posing_plan_from_data(item: Mapping[str, Any] | None) -> PosingPlan | None:
    if not item:
        return None
    return PosingPlan(**{k: item.get(k) for k in PosingPlan.__slots__})


def routines_from_data(items: Sequence[Mapping[str, Any]] | None) -> tuple[RoutineSpec, ...]:
    """Rebuild routine overrides stored on an enrollment."""
    routines = []
    for item in items or ():
        exercises = tuple(
            ExerciseSpec(**{k: ex.get(k) for k in ExerciseSpec.__slots__})
            for ex in item.get("exercises") or ()
        )
        fields_ = {k: item.get(k) for k in RoutineSpec.__slots__ if k != "exercises"}
        routines.append(RoutineSpec(exercises=exercises, **fields_))
    return tuple(sorted(routines, key=lambda r: r.order_in_cycle))


def routines_from_models(routines: Sequence[Any]) -> tuple[RoutineSpec, ...]:
    """Project ORM routines (with exercises) onto :class:`RoutineSpec`."""
    return tuple(
        RoutineSpec(
            id=r.id,
            name=r.name,
            order_in_cycle=r.order_in_cycle,
            day_of_week=r.day_of_week,
            notes=r.notes,
            exercises=tuple(
                ExerciseSpec(
                    id=e.id,
                    name=e.name,
                    sets=e.sets,
                    reps=e.reps,
                    order_in_routine=e.order_in_routine,
                    description=e.description,
                    rest_time=e.rest_time,
                    notes=e.notes,
                )
                for e in sorted(r.exercises, key=lambda e: e.order_in_routine)
            ),
        )
        for r in sorted(routines, key=lambda r: r.order_in_cycle)
    )


def select_payload(program_type: str, program: Any) -> ProgramPayload:
    """
    Return the single active payload of ``program`` for its ``program_type``.

    Only the branch selected by the type is read; other payload keys in
    ``program_data`` are treated as absent.
    """
    data = getattr(program, "program_data", None) or {}
    if program_type == PROGRAM_TYPE_LIFTING:
        return LiftingPayload(routines=routines_from_models(getattr(program, "routines", ())))
    if program_type == PROGRAM_TYPE_DIET:
        return DietPayload(meal_plans=meal_plans_from_data(data.get("meal_plans")))
    if program_type == PROGRAM_TYPE_POSING:
        return PosingPayload(posing_plan=posing_plan_from_data(data.get("posing_plan")))
    raise ValueError(f"Unknown program type: {program_type!r}")


def program_data_for(draft: ProgramDraftPayload) -> dict[str, Any]:
    """Serialize the non-relational part of a payload for ``Program.program_data``."""
    data: dict[str, Any] = {"schema_version": PAYLOAD_SCHEMA_VERSION}
    if draft.type == PROGRAM_TYPE_DIET and draft.meal_plans is not None:
        data["meal_plans"] = [to_json(plan) for plan in draft.meal_plans]
    elif draft.type == PROGRAM_TYPE_POSING and draft.posing_plan is not None:
        data["posing_plan"] = to_json(draft.posing_plan)
    return data


def to_json(value: Any) -> Any:
    """``asdict`` with tuples turned into lists so the result is JSON-ready."""
    if isinstance(value, tuple | list):
        return [to_json(v) for v in value]
    if hasattr(value, "__dataclass_fields__"):
        return {k: to_json(v) for k, v in asdict(value).items()}
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    return value
