"""
Format-agnostic entry point: detect, parse, then validate.
"""
import logging
from typing import Callable, Dict

from abrscope.core.exceptions import EmptyContentError, InvalidBaseUrlError, UnsupportedFormatError
from abrscope.core.models import ManifestFormat, ParsedManifest, ValidationResult
from abrscope.core.parsers.dash import parse_dash
from abrscope.core.parsers.detect import detect_format
from abrscope.core.parsers.hls import parse_hls
from abrscope.core.utils.url import is_valid_base_url
from abrscope.core.validation import validate_dash, validate_hls

logger = logging.getLogger(__name__)

PARSERS: Dict[ManifestFormat, Callable[[str, str], ParsedManifest]] = {
    ManifestFormat.HLS: parse_hls,
    ManifestFormat.DASH: parse_dash,
}

VALIDATORS: Dict[ManifestFormat, Callable[[ParsedManifest, str], ValidationResult]] = {
    ManifestFormat.HLS: validate_hls,
    ManifestFormat.DASH: validate_dash,
}


def parse_manifest(content: str, url: str, validate: bool = True) -> ParsedManifest:
    """
    Parse an HLS playlist or DASH MPD and attach its compliance report.

    Args:
        content:  Raw manifest text.
        url:      Absolute URL the manifest was loaded from.
        validate: Run the matching standards validator.

    Returns:
        ParsedManifest, with ``validation`` set unless the validator failed.

    Raises:
        EmptyContentError: content is empty or whitespace.
        InvalidBaseUrlError: ``url`` is not absolute, so references cannot be resolved.
        UnsupportedFormatError: no parser for the detected format.
        ManifestParseError: the manifest could not be read at all.
    """
    if not content or not content.strip():
        raise EmptyContentError()

    if not is_valid_base_url(url):
        raise InvalidBaseUrlError(url)

    manifest_format = detect_format(content)
    parser = PARSERS.get(manifest_format)
    if parser is None:
        raise UnsupportedFormatError(manifest_format)

    logger.debug(f"Detected {manifest_format.value} manifest for {url}")
    manifest = parser(content, url)

    if not validate:
        return manifest

    validator = VALIDATORS.get(manifest_format)
    if validator is None:
        return manifest

    try:
        return manifest.with_validation(validator(manifest, content))
    except Exception:
        logger.exception(f"Standards validation failed for {url}, continuing without report")
        return manifest


__all__ = [
    'PARSERS',
    'VALIDATORS',
    'detect_format',
    'parse_dash',
    'parse_hls',
    'parse_manifest',
]
