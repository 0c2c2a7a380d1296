"""Domain rules shared across services: onboarding, streaks and the write saga."""

from .onboarding import OnboardingService, OnboardingState, resolve_onboarding_state
from .saga import Saga, SagaFailed
from .streak import StreakService, next_streak, streak_badge

__all__ = [
    "OnboardingService",
    "OnboardingState",
    "resolve_onboarding_state",
    "Saga",
    "SagaFailed",
    "StreakService",
    "next_streak",
    "streak_badge",
]
