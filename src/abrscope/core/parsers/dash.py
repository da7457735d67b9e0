"""
DASH (ISO/IEC 23009-1) MPD parser.
"""
import logging
import re
from typing import List, Optional

from abrscope.core.models import (
    ManifestFormat, ManifestMetadata, ManifestType, ParsedManifest,
    Resolution, Variant, VariantType,
)
from abrscope.core.parsers.common import infer_variant_type
from abrscope.core.parsers.mpd import MpdManifest, MpdPlaylist, parse_mpd
from abrscope.core.utils.attrs import get_attr, split_codecs, to_bitrate, to_float, to_int
from abrscope.core.utils.url import resolve_url

logger = logging.getLogger(__name__)

# Only the seconds-only PT<n>S shape is recognized
_MIN_BUFFER_TIME_RE = re.compile(r'minBufferTime="PT([\d.]+)S"')


def parse_dash(content: str, base_url: str) -> ParsedManifest:
    mpd = parse_mpd(content, base_url)

    variants: List[Variant] = []

    for playlist in mpd.playlists:
        variants.append(_build_variant(len(variants), playlist, base_url))

    for group in mpd.media_groups["AUDIO"].values():
        for playlist in group:
            variants.append(_build_variant(len(variants), playlist, base_url, audio=True))

    metadata = ManifestMetadata(
        duration=mpd.duration,
        min_buffer_time=parse_min_buffer_time(content),
        type=ManifestType.VOD if mpd.end_list or 'type="static"' in content else ManifestType.LIVE,
        encrypted=_is_encrypted(mpd),
        profiles=[p.strip() for p in mpd.profiles.split(",") if p.strip()] if mpd.profiles else None,
    )

    logger.debug(f"Parsed DASH manifest ({mpd.type}): {len(variants)} variant(s)")

    return ParsedManifest(
        format=ManifestFormat.DASH,
        raw=content,
        url=base_url,
        variants=variants,
        metadata=metadata,
    )


def parse_min_buffer_time(content: str) -> Optional[float]:
    """``minBufferTime="PT2.00S"`` -> 2.0. Other ISO-8601 shapes give ``None``."""
    match = _MIN_BUFFER_TIME_RE.search(content)
    if not match:
        return None
    try:
        return float(match.group(1))
    except ValueError:
        return None


def _build_variant(index: int, playlist: MpdPlaylist, base_url: str, audio: bool = False) -> Variant:
    attrs = playlist.attributes
    codecs = split_codecs(get_attr(attrs, "codecs"))

    resolution = None
    frame_rate = None
    if not audio:
        resolution = _resolution(attrs)
        frame_rate = to_float(get_attr(attrs, "frameRate"))

    if audio:
        variant_type = VariantType.AUDIO
    else:
        variant_type = infer_variant_type(
            codecs,
            has_resolution=resolution is not None,
            mime_type=get_attr(attrs, "mimeType"),
        )

    return Variant(
        id=f"variant-{index}",
        bitrate=to_bitrate(get_attr(attrs, "bandwidth")),
        resolution=resolution,
        codecs=codecs,
        frame_rate=frame_rate if frame_rate and frame_rate > 0 else None,
        url=resolve_url(playlist.uri or "", base_url),
        type=variant_type,
    )


def _resolution(attrs) -> Optional[Resolution]:
    width = to_int(get_attr(attrs, "width"), default=0)
    height = to_int(get_attr(attrs, "height"), default=0)
    if width > 0 and height > 0:
        return Resolution(width=width, height=height)
    return None


def _is_encrypted(mpd: MpdManifest) -> bool:
    if mpd.content_protection:
        return True
    audio = (p for group in mpd.media_groups["AUDIO"].values() for p in group)
    return any(p.content_protection for p in (*mpd.playlists, *audio))
