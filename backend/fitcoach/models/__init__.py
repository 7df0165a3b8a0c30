from fitcoach.models.enrollment import ClientProgram
from fitcoach.models.logs import MealLog, WorkoutLog
from fitcoach.models.program import Program, ProgramExercise, Routine
from fitcoach.models.signup import BetaSignup
from fitcoach.models.user import ClientProfile, CoachProfile, User

__all__ = [
    "BetaSignup",
    "ClientProfile",
    "ClientProgram",
    "CoachProfile",
    "MealLog",
    "Program",
    "ProgramExercise",
    "Routine",
    "User",
    "WorkoutLog",
]
