"""
Minimal manifest downloader.
"""
from datetime import timedelta
from logging import getLogger
from typing import Optional

from requests.exceptions import HTTPError, RequestException
from requests_cache import CachedSession

from abrscope.core.config import Config
from abrscope.core.exceptions import FetchError
from abrscope.core.utils.startup import get_cache_file

ACCEPT = "application/vnd.apple.mpegurl, application/dash+xml, */*"

log = getLogger(__name__)


class ManifestClient:
    """HTTP client for manifest URLs with a short-lived response cache."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.timeout = self.config.timeout()

        ttl = self.config.cache_ttl_seconds()
        self.session = CachedSession(
            cache_name=str(get_cache_file()),
            backend='sqlite',
            expire_after=timedelta(seconds=ttl) if ttl > 0 else 0,
            allowable_codes=[200],
        )
        self.session.headers.update({
            "Accept": ACCEPT,
            "User-Agent": self.config.user_agent(),
        })

    def fetch(self, url: str) -> str:
        """Download ``url`` and return its body as text."""
        try:
            response = self.session.get(url, timeout=self.timeout)
            if response.status_code == 404:
                raise FetchError("Manifest not found (404). Please check the URL.", 404, url)
            response.raise_for_status()
        except HTTPError as http_err:
            status = http_err.response.status_code if http_err.response is not None else None
            reason = http_err.response.reason if http_err.response is not None else ""
            raise FetchError(f"HTTP {status}: {reason}".strip(), status, url) from http_err
        except RequestException as err:
            log.error(f"Error fetching {url}: {err}")
            raise FetchError(
                f"Network error fetching {url}. Possible causes: timeout, invalid SSL certificate, or DNS failure.",
                None,
                url,
            ) from err

        log.debug(f"Fetched {url} ({len(response.content)} bytes, cached={getattr(response, 'from_cache', False)})")
        return response.text

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
