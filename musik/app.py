"""
Musik - Interactive terminal shell for searching and building a playlist.
"""
import shlex
import logging
from typing import Callable, List, Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt

from .api import ITunesSearchClient, JsonFileStore, KeyValueStore
from .config import STORAGE_PATH, SORT_KEYS
from .controllers import AudioOutput, PlaybackController, create_audio_output
from .handlers import SearchForm
from .managers import PlaylistStore, PlaylistSaveError, SearchSession
from .models import Track
from .ui import Renderer, parse_choice

logger = logging.getLogger(__name__)

FIELD_ALIASES = {
    'keyword': 'keyword', 'term': 'keyword',
    'media': 'mediaType', 'mediatype': 'mediaType',
    'country': 'country',
    'limit': 'limit',
    'explicit': 'explicit',
}

HELP = """\
[bold]Commands[/bold]
  search [keyword]        run a search (optionally setting the keyword first)
  set <field> <value>     set keyword, media, country, limit or explicit
  form                    show the search form
  reset                   restore the default search form
  results                 show the last results
  sort <none|releaseDate|price>
  play <row>              play/pause the preview of a result row
  pplay <n>               play/pause the preview of a playlist entry
  add <rows>              add result rows to the playlist (e.g. 1,3-5)
  remove <id>             remove a track from the playlist by id
  clear                   clear the whole playlist
  playlist                show the playlist
  quit"""


class Musik:
    """Main application: one shared player, playlist and search session."""

    def __init__(self, client: ITunesSearchClient = None, storage: KeyValueStore = None,
                 audio: AudioOutput = None, console: Console = None,
                 confirm: Callable[[str], bool] = None):
        self.console = console or Console()
        self.renderer = Renderer(self.console)
        self._confirm = confirm or (lambda message: Confirm.ask(message, console=self.console))

        self.audio = audio or create_audio_output()
        self.playback = PlaybackController(self.audio)
        self.playlist = PlaylistStore(storage or JsonFileStore(STORAGE_PATH))
        self.form = SearchForm()
        self.session = SearchSession(client or ITunesSearchClient())
        self.running = False

        self.playlist.restore()

    # ============================================
    # MAIN LOOP
    # ============================================

    def start(self):
        """Run the command loop until quit or EOF."""
        self.running = True
        self.console.print('[bold #BD65FC]Musik[/bold #BD65FC] - iTunes Search. Type "help" for commands.')
        if len(self.playlist):
            self.renderer.playlist(self.playlist, self.playback)

        try:
            while self.running:
                self.audio.poll()
                try:
                    line = Prompt.ask('[bold]musik[/bold]', console=self.console, default='', show_default=False)
                except EOFError:
                    break
                self.audio.poll()
                if not self.handle_command(line):
                    break
        except KeyboardInterrupt:
            self.console.print()
        finally:
            self.shutdown()

    def shutdown(self):
        self.running = False
        self.playback.stop()
        self.session.close()
        logger.info('Musik stopped')

    def handle_command(self, line: str) -> bool:
        """Run one shell command. Returns False when the shell should exit."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self.renderer.notice(f'Could not parse command: {e}', 'red')
            return True
        if not parts:
            return True

        command, args = parts[0].lower(), parts[1:]
        if command in ('quit', 'exit', 'q'):
            return False

        handler = self._commands().get(command)
        if handler is None:
            self.renderer.notice(f'Unknown command: {command}. Type "help".', 'red')
            return True
        handler(args)
        return True

    def _commands(self) -> dict:
        return {
            'help': lambda args: self.console.print(HELP),
            'search': self.search,
            'set': self.set_field,
            'form': lambda args: self.renderer.form(self.form.values, self.form.errors),
            'reset': self.reset_form,
            'results': lambda args: self.show_results(),
            'sort': self.sort,
            'play': self.play_result,
            'pplay': self.play_playlist_entry,
            'add': self.add,
            'remove': self.remove,
            'clear': self.clear,
            'playlist': lambda args: self.renderer.playlist(self.playlist, self.playback),
        }

    # ============================================
    # SEARCH
    # ============================================

    def set_field(self, args: List[str]):
        if len(args) < 2:
            self.renderer.notice('Usage: set <field> <value>', 'red')
            return
        name = FIELD_ALIASES.get(args[0].lower())
        if name is None:
            self.renderer.notice(f'Unknown field: {args[0]}', 'red')
            return
        self.form.update(name, ' '.join(args[1:]))

    def reset_form(self, args: List[str] = None):
        self.form.reset()
        self.renderer.form(self.form.values, self.form.errors)

    def search(self, args: List[str] = None):
        if args:
            self.form.update('keyword', ' '.join(args))

        future = self.session.submit(self.form)
        if future is None:
            if self.form.errors:
                self.renderer.errors(self.form.errors)
            elif self.session.pending:
                self.renderer.notice('A search is already in progress.')
            return

        try:
            with self.console.status('[bold green]Searching for music...'):
                future.result()
        except Exception as e:
            logger.error(f'Search crashed: {e}', exc_info=True)
            self.renderer.notice(f'Search failed: {e}', 'red')
            return

        self.renderer.status(self.session)
        if self.session.results:
            self.show_results()

    def show_results(self):
        if self.session.results or self.session.query is not None:
            self.renderer.results(self.session.results, self.playback, self.session.sort_key)
        else:
            self.renderer.notice('No search yet. Try "search <keyword>".')

    def sort(self, args: List[str]):
        key = args[0] if args else 'none'
        if key not in SORT_KEYS:
            self.renderer.notice(f'Sort by one of: {", ".join(SORT_KEYS)}', 'red')
            return
        self.session.sort(key)
        self.show_results()

    # ============================================
    # PLAYBACK
    # ============================================

    def play_result(self, args: List[str]):
        track = self._pick(args, self.session.results, 'result row')
        if track:
            self.toggle_preview(track)

    def play_playlist_entry(self, args: List[str]):
        track = self._pick(args, self.playlist.tracks, 'playlist entry')
        if track:
            self.toggle_preview(track)

    def toggle_preview(self, track: Track):
        state = self.playback.toggle(track.id, track.preview_url)
        if state is None:
            self.renderer.notice('No preview available for this track')
        elif state.is_idle:
            self.renderer.notice(f'⏸ Paused {track.title}', None)
        else:
            self.renderer.notice(f'▶ Playing {track.title} - {track.artist_name}', 'green')

    # ============================================
    # PLAYLIST
    # ============================================

    def add(self, args: List[str]):
        results = self.session.results
        if not args:
            self.renderer.notice('Usage: add <rows>', 'red')
            return
        try:
            indexes = parse_choice(','.join(args), len(results))
        except ValueError:
            self.renderer.notice(f'Invalid selection: {" ".join(args)}', 'red')
            return
        if not indexes:
            self.renderer.notice('No matching result rows.', 'red')
            return

        for index in indexes:
            track = results[index]
            try:
                added = self.playlist.add(track)
            except PlaylistSaveError as e:
                self.renderer.notice(str(e), 'red')
                return
            if added:
                self.renderer.notice(f'Added {track.title} to your playlist', 'green')
            else:
                self.renderer.notice(f'{track.title}: this track is already in your playlist!')

    def remove(self, args: List[str]):
        try:
            track_id = int(args[0])
        except (IndexError, ValueError):
            self.renderer.notice('Usage: remove <id>', 'red')
            return
        try:
            removed = self.playlist.remove(track_id)
        except PlaylistSaveError as e:
            self.renderer.notice(str(e), 'red')
            return
        if removed:
            self.renderer.notice(f'Removed {track_id} from your playlist', 'green')
        self.renderer.playlist(self.playlist, self.playback)

    def clear(self, args: List[str] = None):
        if not len(self.playlist):
            self.renderer.notice('Your playlist is already empty.')
            return
        if self._confirm('Are you sure you want to clear your entire playlist?'):
            try:
                self.playlist.clear()
            except PlaylistSaveError as e:
                self.renderer.notice(str(e), 'red')
                return
            self.renderer.notice('Playlist cleared', 'green')

    def _pick(self, args: List[str], tracks: List[Track], label: str) -> Optional[Track]:
        try:
            row = int(args[0])
        except (IndexError, ValueError):
            self.renderer.notice(f'Give a {label} number', 'red')
            return None
        if not 1 <= row <= len(tracks):
            self.renderer.notice(f'No {label} {row}', 'red')
            return None
        return tracks[row - 1]
