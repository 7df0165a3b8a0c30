"""Beta signup capture."""

from .service import BetaSignupIn, BetaSignupOut, SignupService

__all__ = ["BetaSignupIn", "BetaSignupOut", "SignupService"]
