"""
Polling filesystem watcher for the development server

Logs writes and creations under the root directory. The filesystem
registry re-reads documents on every request, so the watcher never touches
engine state; it only reports what changed. Directories created after
start-up are walked on the next poll, so the watch set grows with the tree.
"""

import contextvars
import os
import threading
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .log import LOG, WARN


class PollingWatcher:
    """Background thread comparing mtime snapshots of a directory tree"""

    def __init__(self, root: Path, interval: float = 1.0) -> None:
        self.root = Path(root)
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._mtimes: Dict[str, float] = self.snapshot_take()

    def snapshot_take(self) -> Dict[str, float]:
        """Map every path under root (directories included) to its mtime"""
        mtimes: Dict[str, float] = {}
        for dirpath, dirnames, filenames in os.walk(self.root):
            for name in dirnames + filenames:
                path = os.path.join(dirpath, name)
                try:
                    mtimes[path] = os.stat(path).st_mtime
                except FileNotFoundError:
                    # Removed between listing and stat
                    continue
        return mtimes

    def poll(self) -> Tuple[List[str], List[str]]:
        """
        Compare the tree against the previous snapshot and log changes

        Returns:
            (created, modified) path lists
        """
        current = self.snapshot_take()
        created: List[str] = []
        modified: List[str] = []
        for path, mtime in sorted(current.items()):
            previous = self._mtimes.get(path)
            if previous is None:
                created.append(path)
                LOG(f"File created: {path}", level=1)
            elif mtime != previous and not os.path.isdir(path):
                modified.append(path)
                LOG(f"File modified: {path}", level=1)
        self._mtimes = current
        return created, modified

    def start(self) -> None:
        """Start polling in a daemon thread that keeps the caller's log context"""
        if self._thread is not None:
            return
        context = contextvars.copy_context()
        self._thread = threading.Thread(
            target=context.run, args=(self._loop,), name="tagpress-watcher", daemon=True
        )
        self._thread.start()
        LOG(f"Watching {self.root} every {self.interval}s", level=2)

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval * 2)
            self._thread = None

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.poll()
            except OSError as e:
                WARN(f"Watcher error: {e}")
