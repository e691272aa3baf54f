"""
Renderer - Terminal views for the search form, results and playlist.
"""
from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import MEDIA_TYPES, COUNTRIES
from ..controllers.playback import PlaybackController
from ..managers.playlist import PlaylistStore
from ..managers.search import SearchSession
from ..models import Track
from .helpers import (
    format_price, format_date, format_year, format_duration, truncate_text,
)

SORT_LABELS = {'none': 'Default', 'releaseDate': 'Release Date', 'price': 'Price'}


def _create_table(title: str) -> Table:
    return Table(
        title=title,
        box=box.ROUNDED,
        header_style='bold white',
        title_style='bold italic #FFB347',
        border_style='grey50',
        pad_edge=False,
        collapse_padding=True,
    )


class Renderer:
    """Draws application state to a rich Console."""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def form(self, values: Dict[str, str], errors: Dict[str, str]):
        """Current search fields with any validation errors."""
        table = _create_table('Search Music')
        table.add_column('Field', style='#aec7cf', no_wrap=True)
        table.add_column('Value')
        table.add_column('Error', style='red')

        labels = {
            'keyword': values.get('keyword') or '',
            'mediaType': MEDIA_TYPES.get(values.get('mediaType'), values.get('mediaType') or ''),
            'country': COUNTRIES.get(values.get('country'), values.get('country') or ''),
            'limit': values.get('limit') or '',
            'explicit': (values.get('explicit') or 'all').capitalize(),
        }
        for name, value in labels.items():
            table.add_row(name, escape(value), errors.get(name, ''))
        self.console.print(table)

    def errors(self, errors: Dict[str, str]):
        for name, message in errors.items():
            self.console.print(f'[red]{name}: {escape(message)}[/red]')

    def status(self, session: SearchSession):
        """Error or empty-results message from the last search."""
        if not session.message:
            return
        message = escape(session.message)
        if session.message_kind == 'error':
            self.console.print(f'[bold red]⚠ {message}[/bold red]')
        else:
            self.console.print(f'[yellow]{message}[/yellow]')

    def results(self, tracks: List[Track], playback: PlaybackController, sort_key: str = 'none'):
        """Search results table with row numbers for play/add commands."""
        if not tracks:
            self.console.print('[grey50]No music found. Try searching for something![/grey50]')
            return

        table = _create_table(
            f'Search Results ({len(tracks)}) - sorted by {SORT_LABELS.get(sort_key, sort_key)}'
        )
        table.add_column('#', style='#aec7cf', width=4, no_wrap=True)
        table.add_column('Track', max_width=40, no_wrap=True, overflow='ellipsis')
        table.add_column('Artist', max_width=30, no_wrap=True, overflow='ellipsis')
        table.add_column('Album', max_width=30, no_wrap=True, overflow='ellipsis')
        table.add_column('Price', style='#ffcc8e', justify='right', no_wrap=True)
        table.add_column('Release Date', no_wrap=True)
        table.add_column('Preview', justify='center', no_wrap=True)

        for i, track in enumerate(tracks, 1):
            table.add_row(
                str(i),
                escape(truncate_text(track.title, 40)),
                escape(truncate_text(track.artist_name, 30)),
                escape(truncate_text(track.collection_name, 30)),
                format_price(track.price, track.currency),
                format_date(track.release_date),
                self._preview_icon(track, playback),
            )
        self.console.print(table)

    def playlist(self, store: PlaylistStore, playback: PlaybackController):
        """Playlist view with count and total price."""
        tracks = store.tracks
        if not tracks:
            self.console.print('[grey50]Your playlist is empty.[/grey50]')
            return

        currency = next((t.currency for t in tracks if t.currency), None)
        table = _create_table(f'My Playlist ({store.count} tracks)')
        table.add_column('#', style='#aec7cf', width=4, no_wrap=True)
        table.add_column('ID', style='#aec7cf', no_wrap=True)
        table.add_column('Track', max_width=35, no_wrap=True, overflow='ellipsis')
        table.add_column('Artist', max_width=25, no_wrap=True, overflow='ellipsis')
        table.add_column('Album', max_width=25, no_wrap=True, overflow='ellipsis')
        table.add_column('Genre', no_wrap=True)
        table.add_column('Duration', style='#ffcc8e', justify='right', no_wrap=True)
        table.add_column('Year', no_wrap=True)
        table.add_column('Price', style='#ffcc8e', justify='right', no_wrap=True)
        table.add_column('Preview', justify='center', no_wrap=True)

        for i, track in enumerate(tracks, 1):
            table.add_row(
                str(i),
                str(track.id),
                escape(track.title or 'Unknown Track'),
                escape(track.artist_name or 'Unknown Artist'),
                escape(track.collection_name or 'Unknown Album'),
                escape(track.genre or ''),
                format_duration(track.duration_millis),
                format_year(track.release_date),
                format_price(track.effective_price, track.currency),
                self._preview_icon(track, playback),
            )
        self.console.print(table)
        self.console.print(
            f'[bold]Total tracks:[/bold] {store.count}   '
            f'[bold]Total price:[/bold] {format_price(store.total_price, currency)}'
        )

    def notice(self, message: str, style: Optional[str] = 'yellow'):
        message = escape(message)
        self.console.print(f'[{style}]{message}[/{style}]' if style else message)

    @staticmethod
    def _preview_icon(track: Track, playback: PlaybackController) -> str:
        if not track.has_preview:
            return '-'
        return '⏸' if playback.is_playing(track.id) else '▶'
