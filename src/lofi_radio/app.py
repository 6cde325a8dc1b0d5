"""
Service construction for Lofi Radio.

Everything long-lived is built once here and handed to callers by
reference; nothing in the domain layer reaches for a module-level instance.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from lofi_radio.core.config import Config
from lofi_radio.core.database import init_database
from lofi_radio.core.image_cache import ImageCache
from lofi_radio.domain.account import SessionStore, SubscriptionService
from lofi_radio.domain.catalog import CatalogClient, CatalogLibrary, CatalogService, SampleCatalog
from lofi_radio.domain.favorites import FavoritesStore
from lofi_radio.domain.focus import FocusHistory, FocusTimerManager, Scheduler
from lofi_radio.domain.playback import AudioRenderer, MpvRenderer, PlaybackController
from lofi_radio.notifications import DesktopNotifier, NotificationScheduler, NullNotifier


@dataclass
class Services:
    config: Config
    catalog: CatalogLibrary
    renderer: AudioRenderer
    player: PlaybackController
    history: FocusHistory
    timer: FocusTimerManager
    session: SessionStore
    subscription: SubscriptionService
    favorites: FavoritesStore
    images: ImageCache
    notifier: NotificationScheduler

    def close(self) -> None:
        self.player.close()
        close = getattr(self.notifier, "close", None)
        if close is not None:
            close()


def build_catalog_service(config: Config) -> CatalogService:
    """HTTP catalog when an API base URL is configured, sample data otherwise."""
    if not config.api.base_url:
        logger.info("No catalog API configured, using sample catalog")
        return SampleCatalog()
    return CatalogClient(
        config.api.base_url,
        api_key=config.api.api_key,
        request_timeout=config.api.request_timeout,
        resource_timeout=config.api.resource_timeout,
    )


def build_services(
    config: Config,
    db_path: Optional[Path] = None,
    renderer: Optional[AudioRenderer] = None,
    catalog_service: Optional[CatalogService] = None,
    notifier: Optional[NotificationScheduler] = None,
    scheduler: Optional[Scheduler] = None,
) -> Services:
    """Wire up every service from configuration.

    Args:
        config: Loaded configuration
        db_path: SQLite file (defaults to the data directory)
        renderer: Audio renderer (defaults to an MpvRenderer, not yet started)
        catalog_service: Catalog backend (defaults per build_catalog_service)
        notifier: Notification scheduler (defaults per notifications config)
        scheduler: Timer tick scheduler (defaults to the running event loop)
    """
    init_database(db_path)

    catalog = CatalogLibrary(
        catalog_service or build_catalog_service(config), page_size=config.api.page_size
    )

    if renderer is None:
        renderer = MpvRenderer(socket_path=config.player.mpv_socket_path)
    player = PlaybackController(
        renderer,
        catalog=catalog,
        volume=config.player.volume,
        restart_threshold=config.player.restart_threshold,
        skip_interval=config.player.skip_interval,
    )

    if notifier is None:
        notifier = DesktopNotifier() if config.notifications.enabled else NullNotifier()

    history = FocusHistory(db_path)
    timer = FocusTimerManager(
        history,
        notifier=notifier,
        scheduler=scheduler,
        tick_interval=config.focus.tick_interval,
        completion_grace=config.focus.completion_grace,
    )

    session = SessionStore(db_path)
    subscription = SubscriptionService(session)
    favorites = FavoritesStore(
        session, db_path=db_path, free_tier_limit=config.favorites.free_tier_limit
    )

    logger.debug("Services constructed")
    return Services(
        config=config,
        catalog=catalog,
        renderer=renderer,
        player=player,
        history=history,
        timer=timer,
        session=session,
        subscription=subscription,
        favorites=favorites,
        images=ImageCache(),
        notifier=notifier,
    )
