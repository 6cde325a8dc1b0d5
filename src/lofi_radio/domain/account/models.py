"""
Account domain models.

Only what tier checks need: the signed-in user, their subscription tier,
and the derived subscription status.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class SubscriptionTier(str, Enum):
    FREE = "free"
    PREMIUM = "premium"

    @property
    def display_name(self) -> str:
        return self.value.title()


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    TRIAL = "trial"
    CANCELLED = "cancelled"
    NONE = "none"

    @property
    def display_name(self) -> str:
        if self is SubscriptionStatus.TRIAL:
            return "Free Trial"
        return self.value.title()


class PremiumFeature(str, Enum):
    HIGH_QUALITY_AUDIO = "high_quality_audio"
    UNLIMITED_FAVORITES = "unlimited_favorites"
    OFFLINE_DOWNLOADS = "offline_downloads"
    BACKGROUND_PLAY = "background_play"
    CUSTOM_THEMES = "custom_themes"
    ADVANCED_STATS = "advanced_stats"
    NO_ADS = "no_ads"
    FULL_LIBRARY = "full_library"


@dataclass(frozen=True)
class SubscriptionPlan:
    id: str
    name: str
    price: str
    period: str


MONTHLY_PLAN = SubscriptionPlan("premium_monthly", "Monthly", "$4.99", "per month")
ANNUAL_PLAN = SubscriptionPlan("premium_annual", "Annual", "$49.99", "per year")
ALL_PLANS = (MONTHLY_PLAN, ANNUAL_PLAN)


@dataclass(frozen=True)
class User:
    email: str
    username: str
    display_name: Optional[str] = None
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    is_guest: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def guest(cls) -> "User":
        return cls(email="", username="Guest", is_guest=True, id=f"guest_{uuid.uuid4()}")

    @property
    def display_username(self) -> str:
        return self.display_name or self.username

    @property
    def is_premium(self) -> bool:
        return self.subscription_tier == SubscriptionTier.PREMIUM

    def with_tier(self, tier: SubscriptionTier) -> "User":
        return replace(self, subscription_tier=tier)


@dataclass(frozen=True)
class SubscriptionInfo:
    tier: SubscriptionTier
    status: SubscriptionStatus
    expires_at: Optional[datetime] = None
    trial_days_remaining: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.status in (SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIAL)

    @property
    def is_in_trial(self) -> bool:
        return self.status == SubscriptionStatus.TRIAL

    @property
    def display_text(self) -> str:
        if self.is_in_trial and self.trial_days_remaining is not None:
            return f"{self.trial_days_remaining} days left in trial"
        return self.status.display_name
