import logging
import re
from enum import Enum
from urllib.parse import urljoin, urlsplit

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")


class ReferenceKind(Enum):
    ABSOLUTE = "absolute"
    PROTOCOL_RELATIVE = "protocol-relative"
    DOMAIN_RELATIVE = "domain-relative"
    PATH_RELATIVE = "path-relative"


def classify_reference(reference: str) -> ReferenceKind:
    if reference.startswith("//"):
        return ReferenceKind.PROTOCOL_RELATIVE
    if _SCHEME_RE.match(reference):
        return ReferenceKind.ABSOLUTE
    if reference.startswith("/"):
        return ReferenceKind.DOMAIN_RELATIVE
    return ReferenceKind.PATH_RELATIVE


def is_relative_url(url: str) -> bool:
    """True for path-relative and domain-relative references."""
    return classify_reference(url) in (ReferenceKind.PATH_RELATIVE, ReferenceKind.DOMAIN_RELATIVE)


def is_absolute_url(url: str) -> bool:
    return bool(url) and classify_reference(url) == ReferenceKind.ABSOLUTE


def is_valid_base_url(base_url: str) -> bool:
    """
    A usable base has a scheme and a host. ``file:`` URLs are accepted
    without a host (``file:///path/to/master.m3u8``).
    """
    if not base_url or not _SCHEME_RE.match(base_url):
        return False
    try:
        parts = urlsplit(base_url)
    except ValueError:
        return False
    if parts.scheme.lower() == "file":
        return True
    return bool(parts.netloc)


def resolve_url(reference: str, base_url: str) -> str:
    """
    Resolve a manifest or segment URI against the manifest's base URL.

    - https://cdn.example.com/v.m3u8  -> unchanged (absolute)
    - //cdn.example.com/v.m3u8        -> unchanged (protocol-relative, not qualified)
    - /other/v.m3u8                   -> origin of base + reference
    - v.m3u8, ../v.m3u8               -> merged with the base directory

    Never raises: with an unusable base the reference comes back as-is.
    """
    if reference is None:
        reference = ""
    reference = reference.strip()

    kind = classify_reference(reference)
    if kind in (ReferenceKind.ABSOLUTE, ReferenceKind.PROTOCOL_RELATIVE):
        return reference

    if not is_valid_base_url(base_url):
        logger.warning(f"Cannot resolve {reference!r}: invalid base URL {base_url!r}")
        return reference

    if not reference:
        return base_url

    parts = urlsplit(base_url)
    if kind == ReferenceKind.DOMAIN_RELATIVE:
        return f"{parts.scheme}://{parts.netloc}{reference}"

    return urljoin(base_url, reference)
