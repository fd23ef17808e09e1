# core/artwork.py
import threading
import urllib.parse
from typing import Optional

import requests
from PySide6.QtGui import QImage

from .config import APP_NAME, ARTWORK_TIMEOUT_SECONDS
from .debug import debug_log


USER_AGENT = f"{APP_NAME}/1.0"


def _is_http_url(url: str) -> bool:
    try:
        parsed = urllib.parse.urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class ArtworkFetcher:
    """
    Best-effort cover art download.

    Only bytes that decode as an image are returned. Remembers the bytes of
    the last URL that loaded, so polling the same track every cycle costs
    one request. Failures are never cached: the next poll tries again.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = ARTWORK_TIMEOUT_SECONDS):
        self._http = session or requests.Session()
        self._http.headers.setdefault("User-Agent", USER_AGENT)
        self.timeout = timeout
        self._lock = threading.Lock()
        self._last_url = None
        self._last_bytes = None

    def fetch(self, url: Optional[str]) -> Optional[bytes]:
        url = (url or "").strip()
        if not url or not _is_http_url(url):
            if url:
                debug_log(f"Ignoring artwork url {url!r}")
            return None

        with self._lock:
            if url == self._last_url:
                return self._last_bytes

        try:
            r = self._http.get(url, timeout=self.timeout)
            r.raise_for_status()
            data = r.content
        except requests.RequestException as e:
            debug_log(f"Artwork fetch failed for {url}: {e}")
            return None

        if not data:
            debug_log(f"Artwork at {url} was empty")
            return None

        if QImage.fromData(data).isNull():
            debug_log(f"Artwork at {url} is not a decodable image")
            return None

        with self._lock:
            self._last_url = url
            self._last_bytes = data
        return data
