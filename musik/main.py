#!/usr/bin/env python3
"""
Musik - Search the iTunes catalog and build a playlist from the terminal.

Usage:
    musik                          # Interactive shell
    musik search "daft punk"       # One-shot search
    musik playlist                 # Show the saved playlist
    musik --mock                   # Silent previews, in-memory playlist
"""
import sys
import logging
from logging.handlers import RotatingFileHandler

import click
from rich.console import Console

from . import __version__
from .api import ITunesSearchClient, JsonFileStore, MemoryStore
from .app import Musik
from .config import (
    STORAGE_PATH, MEDIA_TYPES, COUNTRIES, EXPLICIT_CHOICES, SORT_KEYS, FORM_DEFAULTS,
    LOG_DIR, LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT, LOG_LEVEL,
)
from .controllers import NullAudioOutput, PlaybackController
from .handlers import SearchForm
from .managers import PlaylistStore, PlaylistSaveError, SearchSession
from .ui import Renderer, parse_choice

logger = logging.getLogger(__name__)


def setup_logging(level_name: str = LOG_LEVEL):
    """Configure logging with console and rotating file handler."""
    level = getattr(logging, level_name.upper(), logging.WARNING)

    console_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )
    file_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Console handler on stderr, tables go to stdout
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(console_formatter)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.addHandler(console)

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        root.addHandler(file_handler)
        root.debug(f'Logging to: {LOG_FILE}')
    except (OSError, PermissionError) as e:
        root.warning(f'Could not create log file: {e}')

    # Quiet down noisy libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)


def _storage(mock: bool):
    return MemoryStore() if mock else JsonFileStore(STORAGE_PATH)


@click.group(invoke_without_command=True, help='Musik - search the iTunes catalog and build a playlist.')
@click.option('--mock', '-m', is_flag=True, help='Silent previews and an in-memory playlist')
@click.option('--log-level', default=LOG_LEVEL, show_default=True, help='Console log level')
@click.version_option(__version__)
@click.pass_context
def cli(ctx, mock, log_level):
    if ctx.obj is None:
        setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj['mock'] = mock
    if ctx.invoked_subcommand is None:
        logger.info(f'Musik {__version__} starting (mock={mock})')
        app = Musik(
            storage=_storage(mock),
            audio=NullAudioOutput() if mock else None,
        )
        app.start()


@cli.command(help='Search the catalog and print the results.')
@click.argument('keyword', nargs=-1, required=True)
@click.option('--media', default=FORM_DEFAULTS['mediaType'], type=click.Choice(list(MEDIA_TYPES)), show_default=True)
@click.option('--country', default=FORM_DEFAULTS['country'], type=click.Choice(list(COUNTRIES)), show_default=True)
@click.option('--limit', default=FORM_DEFAULTS['limit'], show_default=True, help='Between 1 and 200 results')
@click.option('--explicit', default=FORM_DEFAULTS['explicit'], type=click.Choice(EXPLICIT_CHOICES), show_default=True)
@click.option('--sort', 'sort_key', default='none', type=click.Choice(SORT_KEYS), show_default=True)
@click.option('--add', 'add_rows', default=None, help='Result rows to add to the playlist (e.g. 1,3-5)')
@click.pass_context
def search(ctx, keyword, media, country, limit, explicit, sort_key, add_rows):
    renderer = Renderer(Console())
    form = SearchForm(keyword=' '.join(keyword), mediaType=media, country=country,
                      limit=limit, explicit=explicit)
    session = SearchSession(ITunesSearchClient())
    try:
        future = session.submit(form)
        if future is None:
            renderer.errors(form.errors)
            ctx.exit(2)
        with renderer.console.status('[bold green]Searching for music...'):
            outcome = future.result()
    finally:
        session.close()

    renderer.status(session)
    if not outcome.ok:
        ctx.exit(1)

    results = session.sort(sort_key)
    if results:
        renderer.results(results, _silent_playback())

    if add_rows:
        playlist = PlaylistStore(_storage(ctx.obj['mock']))
        playlist.restore()
        try:
            indexes = parse_choice(add_rows, len(results))
        except ValueError:
            raise click.BadParameter(add_rows, param_hint='--add')
        for index in indexes:
            track = results[index]
            try:
                added = playlist.add(track)
            except PlaylistSaveError as e:
                raise click.ClickException(str(e))
            if added:
                renderer.notice(f'Added {track.title} to your playlist', 'green')
            else:
                renderer.notice(f'{track.title}: this track is already in your playlist!')


@cli.command(help='Show the saved playlist.')
@click.pass_context
def playlist(ctx):
    store = PlaylistStore(_storage(ctx.obj['mock']))
    store.restore()
    Renderer(Console()).playlist(store, _silent_playback())


@cli.command(help='Remove a track from the playlist by id.')
@click.argument('track_id', type=int)
@click.pass_context
def remove(ctx, track_id):
    store = PlaylistStore(_storage(ctx.obj['mock']))
    store.restore()
    renderer = Renderer(Console())
    try:
        removed = store.remove(track_id)
    except PlaylistSaveError as e:
        raise click.ClickException(str(e))
    if removed:
        renderer.notice(f'Removed {track_id} from your playlist', 'green')
    else:
        renderer.notice(f'Track {track_id} is not in your playlist')


@cli.command(help='Clear the whole playlist.')
@click.confirmation_option(prompt='Are you sure you want to clear your entire playlist?')
@click.pass_context
def clear(ctx):
    store = PlaylistStore(_storage(ctx.obj['mock']))
    store.restore()
    try:
        store.clear()
    except PlaylistSaveError as e:
        raise click.ClickException(str(e))
    Renderer(Console()).notice('Playlist cleared', 'green')


def _silent_playback():
    return PlaybackController(NullAudioOutput())


def main():
    cli()


if __name__ == '__main__':
    main()
