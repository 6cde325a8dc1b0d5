"""
Subscription state and feature gating.

Billing itself goes through a BillingBackend; the default backend approves
everything immediately, so tier changes are local to the session store.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import AsyncIterator, Callable, Optional, Protocol

from loguru import logger

from lofi_radio.core.exceptions import NoSessionError

from .models import (
    PremiumFeature,
    SubscriptionInfo,
    SubscriptionPlan,
    SubscriptionStatus,
    SubscriptionTier,
)
from .session import SessionStore

TRIAL_DAYS = 7


class BillingBackend(Protocol):
    async def purchase(self, plan: SubscriptionPlan) -> None: ...

    async def start_trial(self) -> None: ...

    async def restore(self) -> None: ...

    async def cancel(self) -> None: ...


class ImmediateBilling:
    """BillingBackend that succeeds without contacting anything."""

    async def purchase(self, plan: SubscriptionPlan) -> None:
        logger.debug(f"Billing: purchase {plan.id}")

    async def start_trial(self) -> None:
        logger.debug("Billing: start trial")

    async def restore(self) -> None:
        logger.debug("Billing: restore purchases")

    async def cancel(self) -> None:
        logger.debug("Billing: cancel subscription")


class SubscriptionService:
    def __init__(
        self,
        session: SessionStore,
        billing: Optional[BillingBackend] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.session = session
        self.billing = billing or ImmediateBilling()
        self._clock = clock
        self._override: Optional[SubscriptionInfo] = None
        self.is_loading = False

    def info(self) -> Optional[SubscriptionInfo]:
        """Current subscription, or None when nobody is signed in."""
        user = self.session.current_user
        if user is None:
            return None
        if self._override is not None and self._override.tier == user.subscription_tier:
            return self._override

        if user.is_premium:
            return SubscriptionInfo(
                tier=SubscriptionTier.PREMIUM,
                status=SubscriptionStatus.ACTIVE,
                expires_at=self._clock() + timedelta(days=30),
            )
        return SubscriptionInfo(tier=SubscriptionTier.FREE, status=SubscriptionStatus.NONE)

    @property
    def is_premium(self) -> bool:
        return self.session.is_premium_tier()

    def has_access(self, feature: PremiumFeature) -> bool:
        info = self.info()
        if info is None:
            return False
        return info.tier == SubscriptionTier.PREMIUM and info.is_active

    async def purchase(self, plan: SubscriptionPlan) -> Optional[SubscriptionInfo]:
        async with self._busy():
            await self.billing.purchase(plan)
            self._override = None
            self.session.upgrade_to_premium()
        logger.info(f"Subscribed to {plan.name} plan")
        return self.info()

    async def start_trial(self) -> Optional[SubscriptionInfo]:
        async with self._busy():
            await self.billing.start_trial()
            self.session.upgrade_to_premium()
            self._override = SubscriptionInfo(
                tier=SubscriptionTier.PREMIUM,
                status=SubscriptionStatus.TRIAL,
                expires_at=self._clock() + timedelta(days=TRIAL_DAYS),
                trial_days_remaining=TRIAL_DAYS,
            )
        logger.info(f"Started {TRIAL_DAYS}-day trial")
        return self.info()

    async def restore(self) -> Optional[SubscriptionInfo]:
        async with self._busy():
            await self.billing.restore()
            self._override = None
            self.session.upgrade_to_premium()
        logger.info("Purchases restored")
        return self.info()

    async def cancel(self) -> Optional[SubscriptionInfo]:
        async with self._busy():
            await self.billing.cancel()
            self.session.downgrade_to_free()
            self._override = SubscriptionInfo(
                tier=SubscriptionTier.FREE, status=SubscriptionStatus.CANCELLED
            )
        logger.info("Subscription cancelled")
        return self.info()

    @asynccontextmanager
    async def _busy(self) -> AsyncIterator[None]:
        if self.session.current_user is None:
            raise NoSessionError("No active session")
        self.is_loading = True
        try:
            yield
        finally:
            self.is_loading = False
