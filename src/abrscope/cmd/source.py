"""
Loading manifests from local files or URLs for the CLI commands.
"""
import logging
from pathlib import Path
from typing import Optional, Tuple

from abrscope.core.client import ManifestClient
from abrscope.core.config import Config
from abrscope.core.exceptions import InvalidBaseUrlError, ManifestError
from abrscope.core.models import ParsedManifest
from abrscope.core.parsers import parse_manifest
from abrscope.core.utils.url import is_valid_base_url

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ("http://", "https://")


def is_remote(source: str) -> bool:
    return source.lower().startswith(REMOTE_SCHEMES)


class SourceCommand:
    """Base for commands that read one or more manifests."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self._client: Optional[ManifestClient] = None

    @property
    def client(self) -> ManifestClient:
        if self._client is None:
            self._client = ManifestClient(self.config)
        return self._client

    def read(self, source: str, base_url: Optional[str] = None) -> Tuple[str, str]:
        """
        Return ``(content, url)`` for a file path or http(s) URL.

        ``base_url`` replaces the URL used to resolve relative references;
        local files default to their own ``file://`` URL.
        """
        if base_url is not None and not is_valid_base_url(base_url):
            raise InvalidBaseUrlError(base_url)

        if is_remote(source):
            content = self.client.fetch(source)
            return content, base_url or source

        path = Path(source).expanduser()
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ManifestError(f"File not found: {source}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestError(f"Could not read {source}: {e}") from e

        logger.debug(f"Read {len(content)} characters from {path}")
        return content, base_url or path.resolve().as_uri()

    def load(self, source: str, base_url: Optional[str] = None,
             validate: Optional[bool] = None) -> ParsedManifest:
        content, url = self.read(source, base_url)
        if validate is None:
            validate = self.config.validate_on_parse()
        return parse_manifest(content, url, validate=validate)

    def close(self):
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
