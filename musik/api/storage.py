"""
Key-Value Storage - Durable text values stored by key.

Handles:
- The storage port (get/set/remove)
- JSON file backend with atomic writes and temp file recovery
- In-memory backend for tests and mock mode
"""
import os
import json
import logging
import threading
from pathlib import Path
from typing import Optional, Dict

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Storage port: text values addressed by key."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    All keys kept in one JSON object file.

    Writes go to a temp file first and are moved into place, so a crash
    mid-write leaves either the old or the new file. A leftover temp file
    is recovered on first read. Writes are serialized with a lock.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.temp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        self._lock = threading.Lock()
        self._recovered = False

    # ============================================
    # PORT
    # ============================================

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key not in data:
                return
            del data[key]
            if data:
                self._write(data)
            else:
                self.path.unlink(missing_ok=True)
                logger.debug(f'Storage empty, removed {self.path}')

    # ============================================
    # FILE HANDLING
    # ============================================

    def _recover(self):
        """Promote a temp file left behind by an interrupted write."""
        self._recovered = True
        if not self.temp_path.exists():
            return
        try:
            json.loads(self.temp_path.read_text(encoding='utf-8'))
        except (json.JSONDecodeError, IOError, OSError) as e:
            logger.warning(f'Discarding unreadable temp storage file: {e}')
            self.temp_path.unlink(missing_ok=True)
            return
        os.replace(self.temp_path, self.path)
        logger.info(f'Recovered storage from {self.temp_path}')

    def _read(self) -> dict:
        if not self._recovered:
            self._recover()
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as e:
            logger.warning(f'Invalid JSON in storage file: {e}')
            return {}
        except (IOError, OSError) as e:
            logger.error(f'Cannot read storage file: {e}', exc_info=True)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.temp_path.write_text(json.dumps(data, indent=2), encoding='utf-8')
        os.replace(self.temp_path, self.path)
