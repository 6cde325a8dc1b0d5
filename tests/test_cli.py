"""Tests for service wiring and the command-line interface."""

import pytest
from rich.console import Console

from lofi_radio import cli
from lofi_radio.app import build_services
from lofi_radio.core.config import Config, FocusConfig
from lofi_radio.core.console import set_console
from lofi_radio.domain.catalog import CatalogClient, SampleCatalog
from lofi_radio.domain.playback import PlaybackState
from lofi_radio.notifications import NullNotifier


@pytest.fixture
def console():
    recorded = Console(record=True, width=160)
    set_console(recorded)
    yield recorded
    set_console(None)


@pytest.fixture
def services(db_path, renderer):
    config = Config(focus=FocusConfig(tick_interval=0.001, completion_grace=0.001))
    services = build_services(config, db_path=db_path, renderer=renderer, notifier=NullNotifier())
    yield services
    services.close()


def _args(*argv):
    return cli.build_parser().parse_args(list(argv))


class TestBuildServices:
    def test_sample_catalog_without_base_url(self, services):
        assert isinstance(services.catalog.service, SampleCatalog)
        assert services.favorites.tier is services.session
        assert services.timer.history is services.history

    def test_http_catalog_with_base_url(self, db_path, renderer):
        config = Config()
        config.api.base_url = "https://api.example.com"
        services = build_services(config, db_path=db_path, renderer=renderer)
        assert isinstance(services.catalog.service, CatalogClient)

    @pytest.mark.anyio
    async def test_queue_refresh_and_play(self, services):
        await services.player.refresh_queue()
        await services.player.play_at(0)

        assert services.player.state == PlaybackState.PLAYING
        assert len(services.player.queue) == 3


class TestParser:
    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            _args()

    def test_favorites_defaults_to_list(self):
        args = _args("favorites")
        assert args.action == "list"
        assert args.track is None

    def test_focus_custom_minutes(self):
        args = _args("focus", "--minutes", "45")
        assert args.minutes == 45.0
        assert args.preset is None


class TestCommands:
    @pytest.mark.anyio
    async def test_tracks(self, services, console):
        assert await cli.cmd_tracks(services, _args("tracks")) == 0
        text = console.export_text()
        assert "Neighbourhood" in text
        assert "3:30" in text

    @pytest.mark.anyio
    async def test_search_no_results(self, services, console):
        assert await cli.cmd_search(services, _args("search", "polka")) == 0
        assert "No tracks match" in console.export_text()

    @pytest.mark.anyio
    async def test_stations(self, services, console):
        assert await cli.cmd_stations(services, _args("stations")) == 0
        assert "Lofi Girl Radio" in console.export_text()

    @pytest.mark.anyio
    async def test_favorites_add_by_number_and_list(self, services, console):
        assert await cli.cmd_favorites(services, _args("favorites", "add", "2")) == 0
        assert services.favorites.is_favorite("sample-track-2")

        assert await cli.cmd_favorites(services, _args("favorites")) == 0
        text = console.export_text()
        assert "Midnight Dreams" in text
        assert "24 favorite slots left" in text

    @pytest.mark.anyio
    async def test_favorites_add_unknown_track(self, services, console):
        assert await cli.cmd_favorites(services, _args("favorites", "add", "nope")) == 1

    @pytest.mark.anyio
    async def test_focus_runs_to_completion_and_shows_stats(self, services, console):
        assert await cli.cmd_focus(services, _args("focus", "--minutes", "0.05")) == 0
        assert services.history.completed_sessions_count() == 1

        assert await cli.cmd_stats(services, _args("stats")) == 0
        text = console.export_text()
        assert "Completed sessions: 1" in text
        assert "Custom" in text

    @pytest.mark.anyio
    async def test_focus_unknown_preset(self, services, console):
        assert await cli.cmd_focus(services, _args("focus", "nap")) == 1
        assert "Unknown preset" in console.export_text()
