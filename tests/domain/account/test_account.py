"""Tests for the session store and subscription service."""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from lofi_radio.core.exceptions import NoSessionError
from lofi_radio.domain.account import (
    MONTHLY_PLAN,
    PremiumFeature,
    SessionStore,
    SubscriptionService,
    SubscriptionStatus,
    SubscriptionTier,
    User,
)

NOW = datetime(2026, 3, 14, 12, 0)


@pytest.fixture
def session(db_path) -> SessionStore:
    return SessionStore(db_path)


@pytest.fixture
def user() -> User:
    return User(email="sam@example.com", username="sam", display_name="Sam Lee")


class TestSessionStore:
    def test_no_user_by_default(self, session):
        assert session.current_user is None
        assert not session.is_premium_tier()
        assert not session.is_logged_in

    def test_guest_session(self, session):
        guest = session.start_guest_session()
        assert guest.is_guest
        assert guest.id.startswith("guest_")
        assert session.is_guest
        assert not session.is_logged_in

    def test_session_persists(self, session, user, db_path):
        session.start_session(user)

        reloaded = SessionStore(db_path)
        assert reloaded.current_user == user
        assert reloaded.current_user.display_username == "Sam Lee"
        assert reloaded.is_logged_in

    def test_end_session(self, session, user, db_path):
        session.start_session(user)
        session.end_session()

        assert session.current_user is None
        assert SessionStore(db_path).current_user is None

    def test_tier_changes(self, session, user, db_path):
        session.start_session(user)

        session.upgrade_to_premium()
        assert session.is_premium_tier()
        assert SessionStore(db_path).is_premium_tier()

        session.downgrade_to_free()
        assert session.current_user.subscription_tier == SubscriptionTier.FREE

    def test_tier_changes_without_user_are_noops(self, session):
        session.upgrade_to_premium()
        assert session.current_user is None

    def test_update_user(self, session, user):
        session.start_session(user)
        session.update_user(User(email=user.email, username="samuel", id=user.id))
        assert session.current_user.display_username == "samuel"


class TestSubscriptionService:
    def test_info_without_user(self, session):
        service = SubscriptionService(session)
        assert service.info() is None
        assert not service.has_access(PremiumFeature.NO_ADS)

    def test_free_user_info(self, session, user):
        session.start_session(user)
        info = SubscriptionService(session).info()
        assert info.tier == SubscriptionTier.FREE
        assert info.status == SubscriptionStatus.NONE
        assert not info.is_active

    @pytest.mark.anyio
    async def test_purchase_upgrades(self, session, user):
        session.start_session(user)
        billing = AsyncMock()
        service = SubscriptionService(session, billing=billing, clock=lambda: NOW)

        info = await service.purchase(MONTHLY_PLAN)

        billing.purchase.assert_awaited_once_with(MONTHLY_PLAN)
        assert info.status == SubscriptionStatus.ACTIVE
        assert info.is_active
        assert session.is_premium_tier()
        assert service.has_access(PremiumFeature.UNLIMITED_FAVORITES)
        assert not service.is_loading

    @pytest.mark.anyio
    async def test_trial_then_cancel(self, session, user):
        session.start_session(user)
        service = SubscriptionService(session, clock=lambda: NOW)

        info = await service.start_trial()
        assert info.status == SubscriptionStatus.TRIAL
        assert info.is_active
        assert info.trial_days_remaining == 7
        assert info.display_text == "7 days left in trial"
        assert service.has_access(PremiumFeature.OFFLINE_DOWNLOADS)

        info = await service.cancel()
        assert info.status == SubscriptionStatus.CANCELLED
        assert info.tier == SubscriptionTier.FREE
        assert not service.has_access(PremiumFeature.OFFLINE_DOWNLOADS)

    @pytest.mark.anyio
    async def test_restore(self, session, user):
        session.start_session(user)
        service = SubscriptionService(session)

        info = await service.restore()

        assert info.tier == SubscriptionTier.PREMIUM
        assert info.status == SubscriptionStatus.ACTIVE

    @pytest.mark.anyio
    async def test_billing_requires_session(self, session):
        service = SubscriptionService(session)
        with pytest.raises(NoSessionError):
            await service.purchase(MONTHLY_PLAN)
        assert not service.is_loading

    @pytest.mark.anyio
    async def test_billing_failure_leaves_tier(self, session, user):
        session.start_session(user)
        billing = AsyncMock()
        billing.purchase.side_effect = RuntimeError("declined")
        service = SubscriptionService(session, billing=billing)

        with pytest.raises(RuntimeError):
            await service.purchase(MONTHLY_PLAN)

        assert not session.is_premium_tier()
        assert not service.is_loading
