"""
Tests for the interactive shell - commands wired to the shared components.
"""
import io
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from musik.api.storage import MemoryStore
from musik.app import Musik
from musik.config import PLAYLIST_KEY
from musik.models import SearchOutcome, Track


@pytest.fixture
def client(sample_results):
    client = MagicMock()
    client.search.return_value = SearchOutcome(
        tracks=[Track.from_api(raw) for raw in sample_results]
    )
    return client


@pytest.fixture
def app(client, memory_store, audio):
    console = Console(file=io.StringIO(), width=200, force_terminal=False)
    app = Musik(client=client, storage=memory_store, audio=audio, console=console,
                confirm=lambda message: True)
    yield app
    app.shutdown()


def output(app):
    return app.console.file.getvalue()


class TestSearchCommands:
    """Tests for search, form and sort commands."""

    def test_search_shows_results(self, app, client):
        assert app.handle_command('search daft punk') is True
        assert client.search.call_args.args[0].keyword == 'daft punk'
        assert 'One More Time' in output(app)
        assert 'Search Results (3)' in output(app)

    def test_search_validation_errors(self, app, client):
        app.handle_command('set limit 500')
        app.handle_command('search x')
        client.search.assert_not_called()
        assert 'Keyword must be at least 2 characters' in output(app)
        assert 'Limit must be between 1 and 200' in output(app)

    def test_empty_results_message(self, app, client):
        client.search.return_value = SearchOutcome(tracks=[])
        app.handle_command('search abc')
        assert 'No results found. Try different search terms.' in output(app)
        assert app.session.results == []

    def test_set_uses_field_aliases(self, app):
        app.handle_command('set media podcast')
        app.handle_command('set country JP')
        assert app.form.values['mediaType'] == 'podcast'
        assert app.form.values['country'] == 'JP'

    def test_reset(self, app):
        app.handle_command('set keyword hello')
        app.handle_command('reset')
        assert app.form.values['keyword'] == ''

    def test_sort(self, app):
        app.handle_command('search daft punk')
        app.handle_command('sort price')
        assert [t.id for t in app.session.results] == [1440857781, 1440857790, 555]
        app.handle_command('sort releaseDate')
        assert [t.id for t in app.session.results] == [1440857790, 1440857781, 555]

    def test_unknown_command(self, app):
        assert app.handle_command('dance') is True
        assert 'Unknown command' in output(app)

    def test_quit(self, app):
        assert app.handle_command('quit') is False


class TestPlaylistCommands:
    """Tests for add, remove and clear."""

    def test_add_rows(self, app, memory_store):
        app.handle_command('search daft punk')
        app.handle_command('add 1-2')
        assert [t.id for t in app.playlist.tracks] == [1440857781, 1440857790]
        assert PLAYLIST_KEY in memory_store.data

    def test_add_duplicate_notice(self, app):
        app.handle_command('search daft punk')
        app.handle_command('add 1')
        app.handle_command('add 1')
        assert len(app.playlist) == 1
        assert 'already in your playlist' in output(app)

    def test_add_save_failure_notice(self, app, memory_store):
        app.handle_command('search daft punk')
        with patch.object(memory_store, 'set', side_effect=OSError('disk full')):
            app.handle_command('add 1')

        assert len(app.playlist) == 0
        assert 'Cannot save playlist: disk full' in output(app)

    def test_remove(self, app, memory_store):
        app.handle_command('search daft punk')
        app.handle_command('add 1')
        app.handle_command('remove 1440857781')
        assert len(app.playlist) == 0
        assert PLAYLIST_KEY not in memory_store.data

    def test_clear_requires_confirmation(self, app):
        app.handle_command('search daft punk')
        app.handle_command('add 1,2')

        app._confirm = lambda message: False
        app.handle_command('clear')
        assert len(app.playlist) == 2

        app._confirm = lambda message: True
        app.handle_command('clear')
        assert len(app.playlist) == 0

    def test_playlist_totals(self, app):
        app.handle_command('search daft punk')
        app.handle_command('add 1-3')
        app.handle_command('playlist')
        assert 'Total tracks: 3' in output(app)
        assert 'Total price: USD26.27' in output(app)

    def test_restores_saved_playlist(self, client, audio, sample_results):
        storage = MemoryStore()
        first = Musik(client=client, storage=storage, audio=audio,
                      console=Console(file=io.StringIO()))
        first.playlist.add(Track.from_api(sample_results[0]))
        first.shutdown()

        second = Musik(client=client, storage=storage, audio=audio,
                       console=Console(file=io.StringIO()))
        assert [t.id for t in second.playlist.tracks] == [1440857781]
        second.shutdown()


class TestPlaybackCommands:
    """Tests for preview playback across views."""

    def test_one_player_shared_by_views(self, app, audio):
        """Playing from the playlist stops the preview started from results."""
        app.handle_command('search daft punk')
        app.handle_command('add 1')
        app.handle_command('play 1')
        assert app.playback.is_playing(1440857781)

        app.handle_command('pplay 1')
        assert app.playback.state.is_idle
        assert audio.calls[-1] == ('pause',)

    def test_no_preview_notice(self, app):
        app.handle_command('search daft punk')
        app.handle_command('play 2')
        assert 'No preview available for this track' in output(app)
        assert app.playback.state.is_idle

    def test_bad_row(self, app):
        app.handle_command('search daft punk')
        app.handle_command('play 9')
        assert 'No result row 9' in output(app)
