from abrscope.core.models import ManifestFormat

HLS_HEADER = "#EXTM3U"
SNIFF_WINDOW = 100


def detect_format(content: str) -> ManifestFormat:
    """
    Sniff raw manifest text.

    DASH manifests are XML (start with ``<``), HLS playlists start with
    ``#EXTM3U``. Anything ambiguous is assumed to be HLS.
    """
    if not isinstance(content, str):
        return ManifestFormat.HLS

    trimmed = content.lstrip()

    if trimmed.startswith(HLS_HEADER):
        return ManifestFormat.HLS

    if trimmed.startswith("<"):
        return ManifestFormat.DASH

    head = trimmed[:SNIFF_WINDOW]
    if "<MPD" in head or "<?xml" in head:
        return ManifestFormat.DASH

    return ManifestFormat.HLS
