"""Enrollment service and DTOs."""

from __future__ import annotations

from ._converters import effective_routines
from .dto import CustomizationIn, EnrollmentOut, ProgressOut
from .service import EnrollmentService

__all__ = [
    "EnrollmentService",
    "CustomizationIn",
    "EnrollmentOut",
    "ProgressOut",
    "effective_routines",
]
