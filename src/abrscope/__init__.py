"""
abrscope - HLS/DASH manifest parser and standards validator.
"""
__version__ = "1.0.0"

from abrscope.core.exceptions import (
    EmptyContentError, FetchError, InvalidBaseUrlError, ManifestError,
    ManifestParseError, UnsupportedFormatError,
)
from abrscope.core.models import ManifestFormat, ParsedManifest, ValidationResult
from abrscope.core.parsers import detect_format, parse_dash, parse_hls, parse_manifest
from abrscope.core.utils.diff import diff_manifests
from abrscope.core.utils.url import resolve_url
from abrscope.core.validation import lint_manifest, validate_dash, validate_hls

__all__ = [
    '__version__',
    'EmptyContentError',
    'FetchError',
    'InvalidBaseUrlError',
    'ManifestError',
    'ManifestFormat',
    'ManifestParseError',
    'ParsedManifest',
    'UnsupportedFormatError',
    'ValidationResult',
    'detect_format',
    'diff_manifests',
    'lint_manifest',
    'parse_dash',
    'parse_hls',
    'parse_manifest',
    'resolve_url',
    'validate_dash',
    'validate_hls',
]
