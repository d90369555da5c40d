from __future__ import annotations

import hashlib
import threading
from pathlib import Path
from typing import Callable, Optional

from .css_extractor import read_stylesheet
from .logger import get_logger
from .models import StyleSheet

log = get_logger(__name__)

__all__ = ["StyleCache", "CHANGE_EVENT"]

CHANGE_EVENT = "change"


def _fingerprint(css_path: Path) -> Optional[str]:
    try:
        raw = css_path.read_bytes()
        mtime = css_path.stat().st_mtime_ns
    except OSError:
        return None
    return hashlib.sha256(raw + str(mtime).encode()).hexdigest()


class StyleCache:
    """
    Holds the currently published :class:`StyleSheet` for one CSS file.

    A reload parses into a brand new sheet and publishes it with a single
    reference assignment, so readers see either the old or the new sheet and
    never a partially built one. Readers should take ``cache.sheet`` once per
    synthesis call.
    """

    def __init__(
        self,
        css_path: Path,
        *,
        loader: Optional[Callable[[Path], StyleSheet]] = None,
    ) -> None:
        self.css_path = Path(css_path)
        self._loader = loader or read_stylesheet
        self._sheet: StyleSheet = StyleSheet.empty()
        self._fingerprint: Optional[str] = None
        self._write_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def sheet(self) -> StyleSheet:
        return self._sheet

    def load(self) -> StyleSheet:
        """Initial load; a missing or unreadable file publishes an empty sheet."""
        with self._write_lock:
            self._fingerprint = _fingerprint(self.css_path)
            try:
                self._sheet = self._loader(self.css_path)
            except FileNotFoundError:
                log.warning(f"CSS file not found: {self.css_path}")
                self._sheet = StyleSheet.empty()
            except (OSError, UnicodeDecodeError) as exc:
                log.warning(f"Could not read CSS file {self.css_path}: {exc}")
                self._sheet = StyleSheet.empty()
        return self._sheet

    def reload(self) -> bool:
        """
        Rebuild the sheet from disk and publish it.

        Returns True when a new sheet was published. When the file is missing
        or cannot be read the previous sheet stays in place.
        """
        with self._write_lock:
            try:
                fresh = self._loader(self.css_path)
            except (OSError, UnicodeDecodeError) as exc:
                log.error(f"Failed to reload CSS {self.css_path}: {exc}")
                return False
            self._fingerprint = _fingerprint(self.css_path)
            self._sheet = fresh
        log.info(f"CSS updated: {self.css_path} ({len(fresh)} classes)")
        return True

    def notify(self, path: Path, event: str) -> bool:
        """Handle a file watcher notification; only changes to our file reload."""
        if event != CHANGE_EVENT:
            return False
        if Path(path).resolve() != self.css_path.resolve():
            return False
        return self.reload()

    def poll(self) -> bool:
        """Reload if the file's content or mtime changed since the last load."""
        current = _fingerprint(self.css_path)
        if current is None or current == self._fingerprint:
            return False
        return self.notify(self.css_path, CHANGE_EVENT)

    def watch(self, interval: float = 0.5) -> None:
        """Start a daemon thread polling the CSS file for changes."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._watch_loop,
            args=(interval,),
            name=f"rbxcss-watch:{self.css_path.name}",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    @property
    def watching(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _watch_loop(self, interval: float) -> None:
        while not self._stop.wait(interval):
            try:
                self.poll()
            except Exception as exc:  # keep the watcher alive; the old sheet stays published
                log.error(f"CSS watcher error for {self.css_path}: {exc}")
