"""Convenience exports for request and response schemas."""

from __future__ import annotations

from .auth import (
    BetaSignupOutSchema,
    BetaSignupSchema,
    LoginSchema,
    ProfileUpdateSchema,
    RegisterSchema,
    TokenResponseSchema,
    UserSchema,
)
from .common import MetaSchema, PaginationQuerySchema, build_meta
from .enrollment import (
    EnrollmentPatchSchema,
    EnrollmentSchema,
    MealLogCreateSchema,
    MealLogSchema,
    MealLogUpdateSchema,
    WorkoutLogCreateSchema,
    WorkoutLogSchema,
    WorkoutLogUpdateSchema,
)
from .program import (
    ProgramCreateSchema,
    ProgramListQuerySchema,
    ProgramSchema,
    ProgramUpdateSchema,
)
from .reporting import (
    ClientDashboardSchema,
    ClientHistorySchema,
    CoachDashboardSchema,
    ProgressReportSchema,
)

__all__ = [
    "BetaSignupOutSchema",
    "BetaSignupSchema",
    "ClientDashboardSchema",
    "ClientHistorySchema",
    "CoachDashboardSchema",
    "EnrollmentPatchSchema",
    "EnrollmentSchema",
    "LoginSchema",
    "MealLogCreateSchema",
    "MealLogSchema",
    "MealLogUpdateSchema",
    "MetaSchema",
    "PaginationQuerySchema",
    "ProfileUpdateSchema",
    "ProgramCreateSchema",
    "ProgramListQuerySchema",
    "ProgramSchema",
    "ProgramUpdateSchema",
    "ProgressReportSchema",
    "RegisterSchema",
    "TokenResponseSchema",
    "UserSchema",
    "WorkoutLogCreateSchema",
    "WorkoutLogSchema",
    "WorkoutLogUpdateSchema",
    "build_meta",
]
