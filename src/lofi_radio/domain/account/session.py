"""
Signed-in user persistence.

Holds at most one user (guest or registered) in the `current_user` table.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from lofi_radio.core.database import get_db_connection, init_database

from .models import SubscriptionTier, User


class SessionStore:
    """The current user session, persisted in SQLite."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path
        init_database(db_path)
        self._user: Optional[User] = self._load()

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def is_guest(self) -> bool:
        return self._user is not None and self._user.is_guest

    @property
    def is_logged_in(self) -> bool:
        return self._user is not None and not self._user.is_guest

    def _load(self) -> Optional[User]:
        with get_db_connection(self.db_path) as conn:
            row = conn.execute("SELECT * FROM current_user WHERE id = 1").fetchone()

        if row is None:
            return None

        try:
            tier = SubscriptionTier(row["subscription_tier"])
        except ValueError:
            logger.warning(
                f"Unknown subscription tier {row['subscription_tier']!r}, treating as free"
            )
            tier = SubscriptionTier.FREE

        return User(
            id=row["user_id"],
            email=row["email"] or "",
            username=row["username"],
            display_name=row["display_name"],
            subscription_tier=tier,
            is_guest=bool(row["is_guest"]),
        )

    def _save(self, user: User) -> None:
        with get_db_connection(self.db_path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO current_user
                    (id, user_id, email, username, display_name, is_guest,
                     subscription_tier, updated_at)
                VALUES (1, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
                """,
                (
                    user.id,
                    user.email,
                    user.username,
                    user.display_name,
                    int(user.is_guest),
                    user.subscription_tier.value,
                ),
            )
            conn.commit()

    def start_session(self, user: User) -> None:
        self._save(user)
        self._user = user
        logger.info(f"Session started for {user.display_username} (guest={user.is_guest})")

    def start_guest_session(self) -> User:
        user = User.guest()
        self.start_session(user)
        return user

    def end_session(self) -> None:
        with get_db_connection(self.db_path) as conn:
            conn.execute("DELETE FROM current_user")
            conn.commit()
        self._user = None
        logger.info("Session ended")

    def update_user(self, user: User) -> None:
        self._save(user)
        self._user = user

    def is_premium_tier(self) -> bool:
        return self._user is not None and self._user.is_premium

    def upgrade_to_premium(self) -> None:
        if self._user is None:
            return
        self.update_user(self._user.with_tier(SubscriptionTier.PREMIUM))

    def downgrade_to_free(self) -> None:
        if self._user is None:
            return
        self.update_user(self._user.with_tier(SubscriptionTier.FREE))
