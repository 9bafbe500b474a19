"""Cache for filesystem lookups made by the dead-link rule."""
import logging
import threading
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class LinkTargetCache:
    """
    Memoizes path existence checks and per-file heading anchors.

    One instance can be shared by concurrent lint passes; writes are
    insert-if-absent under a lock, so the first stored value wins.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._exists: dict[str, bool] = {}
        self._anchors: dict[str, frozenset[str]] = {}
        self._hits = 0
        self._misses = 0

    def exists(self, path: Path) -> bool:
        """True when ``path`` is an existing file or directory. I/O errors count as missing."""
        key = str(path)
        with self._lock:
            if key in self._exists:
                self._hits += 1
                return self._exists[key]
            self._misses += 1

        try:
            found = path.exists()
        except OSError as e:
            logger.debug(f"Cannot stat {path}: {e}")
            found = False

        with self._lock:
            return self._exists.setdefault(key, found)

    def anchors(self, path: Path, loader: Callable[[Path], frozenset[str]]) -> Optional[frozenset[str]]:
        """
        Heading anchors for ``path``, computed by ``loader`` on first use.

        Returns None when the file cannot be read.
        """
        key = str(path)
        with self._lock:
            if key in self._anchors:
                self._hits += 1
                return self._anchors[key]
            self._misses += 1

        try:
            anchors = loader(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Cannot read anchors from {path}: {e}")
            return None

        with self._lock:
            return self._anchors.setdefault(key, anchors)

    def stats(self) -> dict:
        with self._lock:
            return {
                "paths": len(self._exists),
                "anchor_files": len(self._anchors),
                "hits": self._hits,
                "misses": self._misses,
            }

    def clear(self) -> int:
        """Drop every cached entry. Returns the number of entries removed."""
        with self._lock:
            count = len(self._exists) + len(self._anchors)
            self._exists.clear()
            self._anchors.clear()
            self._hits = 0
            self._misses = 0
        if count:
            logger.info(f"Cleared {count} cached link target(s)")
        return count
