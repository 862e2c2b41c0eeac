# Per-capture map from a resource URL to the object already stored for it

import logging
import threading
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedAsset:
    stored_path: str
    content_type: str


class AssetCache:
    """
    Deduplicates resources within one capture.

    The first successful store of a URL is authoritative; later references
    reuse it without fetching. URLs that failed are remembered too, so each
    resource is attempted at most once per capture.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries = {}
        self._failed = set()

    def get(self, url):
        with self._lock:
            return self._entries.get(url)

    def put(self, url, stored_path, content_type):
        with self._lock:
            entry = CachedAsset(stored_path=stored_path, content_type=content_type)
            self._entries[url] = entry
            self._failed.discard(url)
        logger.debug(f"Cached {url} -> {stored_path}")
        return entry

    def discard(self, url):
        with self._lock:
            self._entries.pop(url, None)

    def mark_failed(self, url):
        with self._lock:
            self._failed.add(url)

    def has_failed(self, url):
        with self._lock:
            return url in self._failed

    def __contains__(self, url):
        with self._lock:
            return url in self._entries

    def __len__(self):
        with self._lock:
            return len(self._entries)
