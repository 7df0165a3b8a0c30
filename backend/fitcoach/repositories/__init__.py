from fitcoach.repositories.base import BaseRepository, Page, Pagination
from fitcoach.repositories.enrollment import ClientProgramRepository
from fitcoach.repositories.logs import MealLogRepository, WorkoutLogRepository
from fitcoach.repositories.program import ProgramRepository
from fitcoach.repositories.signup import BetaSignupRepository
from fitcoach.repositories.user import ProfileRepository, UserRepository

__all__ = [
    "BaseRepository",
    "BetaSignupRepository",
    "ClientProgramRepository",
    "MealLogRepository",
    "Page",
    "Pagination",
    "ProfileRepository",
    "ProgramRepository",
    "UserRepository",
    "WorkoutLogRepository",
]
