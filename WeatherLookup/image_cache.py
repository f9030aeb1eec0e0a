"""In-memory icon image cache and the loader that fills it."""
import io
import logging
import threading
from typing import Dict, Optional

import requests
from PIL import Image, UnidentifiedImageError

from weather_data import WeatherSnapshot
from weather_provider import DecodeError, NetworkError


class ImageCache:
    """
    Keyed in-memory cache of decoded images.

    Keys are icon URLs. The cache is unbounded: there is no TTL and no
    eviction, entries live until clear() or process exit.
    """

    def __init__(self):
        self._images: Dict[str, Image.Image] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Image.Image]:
        with self._lock:
            return self._images.get(key)

    def put(self, key: str, image: Image.Image) -> None:
        """Store image under key, replacing any existing entry."""
        with self._lock:
            self._images[key] = image

    def clear(self) -> None:
        with self._lock:
            self._images.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._images

    def __len__(self) -> int:
        with self._lock:
            return len(self._images)


class IconLoader:
    """
    Fetches weather icons, going to the network only on a cache miss.

    Concurrent misses for the same URL are not coalesced: each one fetches,
    and whichever finishes last owns the cache entry.
    """

    def __init__(self, cache: ImageCache, timeout: Optional[float] = None):
        """
        Args:
            cache: Cache shared with every other consumer of icons
            timeout: HTTP request timeout in seconds (None keeps the library default)
        """
        self.cache = cache
        self.timeout = timeout

    def load(self, url: str) -> Image.Image:
        """
        Return the image for url, fetching and caching it on a miss.

        Raises:
            NetworkError: If the download fails
            DecodeError: If the downloaded bytes are not an image
        """
        cached = self.cache.get(url)
        if cached is not None:
            logging.debug(f"Icon cache hit: {url}")
            return cached

        logging.info(f"Fetching icon: {url}")
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error while fetching icon {url}: {e}")
            raise NetworkError(f"Network error: {str(e)}") from e

        if not response.ok:
            logging.error(f"Icon request failed with status {response.status_code}")
            raise NetworkError(
                f"HTTP {response.status_code} fetching icon {url}",
                status_code=response.status_code,
            )

        try:
            image = Image.open(io.BytesIO(response.content))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logging.error(f"Could not decode icon {url}: {e}")
            raise DecodeError(f"Could not decode icon {url}: {str(e)}") from e

        self.cache.put(url, image)
        logging.debug(f"Cached icon {url} ({image.width}x{image.height})")
        return image

    def load_for_snapshot(self, snapshot: WeatherSnapshot) -> Optional[Image.Image]:
        """Load the icon of the snapshot's primary condition, if it has one."""
        url = snapshot.icon_url
        if url is None:
            return None
        return self.load(url)
