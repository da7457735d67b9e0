from typing import Dict

from abrscope.core.models import ManifestDiff, ParsedManifest, Variant

VARIANT_FIELDS = ("bitrate", "url", "type", "resolution", "codecs")
METADATA_FIELDS = ("type", "duration", "encrypted")


def diff_manifests(a: ParsedManifest, b: ParsedManifest) -> ManifestDiff:
    """
    Compare two manifests variant by variant, matching on ``id``.

    Changed variants are reported as they appear in ``b``.
    """
    old: Dict[str, Variant] = {v.id: v for v in a.variants}
    new: Dict[str, Variant] = {v.id: v for v in b.variants}

    added = [v for v in b.variants if v.id not in old]
    removed = [v for v in a.variants if v.id not in new]
    changed = [v for v in b.variants if v.id in old and _variant_changed(old[v.id], v)]

    metadata_changed = any(
        getattr(a.metadata, name) != getattr(b.metadata, name) for name in METADATA_FIELDS
    )

    return ManifestDiff(
        variants_added=added,
        variants_removed=removed,
        variants_changed=changed,
        metadata_changed=metadata_changed,
        has_changes=bool(added or removed or changed or metadata_changed),
    )


def _variant_changed(before: Variant, after: Variant) -> bool:
    return any(getattr(before, name) != getattr(after, name) for name in VARIANT_FIELDS)
