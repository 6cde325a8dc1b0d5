"""Account domain - signed-in user, subscription tier and feature gating."""

from .models import (
    ALL_PLANS,
    ANNUAL_PLAN,
    MONTHLY_PLAN,
    PremiumFeature,
    SubscriptionInfo,
    SubscriptionPlan,
    SubscriptionStatus,
    SubscriptionTier,
    User,
)
from .session import SessionStore
from .subscription import TRIAL_DAYS, BillingBackend, ImmediateBilling, SubscriptionService

__all__ = [
    # Models
    "User",
    "SubscriptionTier",
    "SubscriptionStatus",
    "SubscriptionInfo",
    "SubscriptionPlan",
    "PremiumFeature",
    "MONTHLY_PLAN",
    "ANNUAL_PLAN",
    "ALL_PLANS",
    # Services
    "SessionStore",
    "SubscriptionService",
    "BillingBackend",
    "ImmediateBilling",
    "TRIAL_DAYS",
]
