from .validation import DetectedFeature, PlaylistType, Severity, ValidationIssue, ValidationResult
from .manifest import (
    ByteRange, ManifestFormat, ManifestMetadata, ManifestType,
    ParsedManifest, Resolution, Segment, Variant, VariantType,
)
from .diff import ManifestDiff

__all__ = [
    'ByteRange',
    'DetectedFeature',
    'ManifestDiff',
    'ManifestFormat',
    'ManifestMetadata',
    'ManifestType',
    'ParsedManifest',
    'PlaylistType',
    'Resolution',
    'Segment',
    'Severity',
    'ValidationIssue',
    'ValidationResult',
    'Variant',
    'VariantType',
]
