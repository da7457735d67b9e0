"""
HLS (RFC 8216) playlist parser.

Tokenizing is left to the ``m3u8`` library; this module maps its output
onto the unified manifest model.
"""
import logging
import re
from typing import Any, Dict, List, Optional

import m3u8

from abrscope.core.exceptions import ManifestParseError
from abrscope.core.models import (
    ByteRange, ManifestFormat, ManifestMetadata, ManifestType,
    ParsedManifest, Resolution, Segment, Variant,
)
from abrscope.core.parsers.common import infer_variant_type
from abrscope.core.utils.attrs import get_attr, split_codecs, to_bitrate, to_float, to_int
from abrscope.core.utils.url import resolve_url
from abrscope.core.validation.hls_rules import detect_playlist_type

logger = logging.getLogger(__name__)

TOKENIZE_ERRORS = (ValueError, TypeError, KeyError, IndexError, AttributeError)

# One attribute of an attribute list; commas inside quoted values do not split
_ATTRIBUTE_RE = re.compile(r"""(?:[^,"']|"[^"]*"|'[^']*')+""")


def tokenize(content: str) -> Dict[str, Any]:
    """
    Run the m3u8 tokenizer.

    A tag value the tokenizer cannot convert (``#EXT-X-VERSION:x``,
    ``BANDWIDTH=abc``) does not fail the playlist: the offending attribute
    or tag is dropped, ``#EXTINF`` falls back to a zero duration, and the
    playlist is tokenized again.
    """
    try:
        return m3u8.parse(content, strict=False)
    except TOKENIZE_ERRORS as e:
        logger.debug(f"Tokenizer rejected playlist ({e}), repairing unparseable tags")

    repaired = "\n".join(_repair_line(line) for line in content.splitlines())
    try:
        return m3u8.parse(repaired, strict=False)
    except TOKENIZE_ERRORS as e:
        raise ManifestParseError(f"Could not tokenize HLS playlist: {e}") from e


def _tokenizes(line: str) -> bool:
    try:
        m3u8.parse(line, strict=False)
    except TOKENIZE_ERRORS:
        return False
    return True


def _repair_line(line: str) -> str:
    stripped = line.strip()
    if not stripped.startswith("#EXT") or _tokenizes(stripped):
        return line

    tag, _, value = stripped.partition(":")
    if tag == "#EXTINF":
        _, _, title = value.partition(",")
        logger.debug(f"Unparseable duration in {stripped!r}, using 0")
        return f"#EXTINF:0,{title}"

    if "=" in value:
        kept = [attr for attr in _ATTRIBUTE_RE.findall(value) if _tokenizes(f"{tag}:{attr}")]
        rebuilt = f"{tag}:{','.join(kept)}"
        if _tokenizes(rebuilt):
            logger.debug(f"Dropped unparseable attributes from {stripped!r}")
            return rebuilt

    logger.debug(f"Dropped unparseable tag {stripped!r}")
    return ""


def parse_hls(content: str, base_url: str) -> ParsedManifest:
    data = tokenize(content)

    variants = [
        _build_variant(index, playlist, base_url)
        for index, playlist in enumerate(data.get("playlists") or [])
    ]

    is_master = detect_playlist_type(content) == "master"
    segments = None if is_master else _build_segments(data, base_url)

    metadata = ManifestMetadata(
        version=str(data["version"]) if data.get("version") is not None else None,
        target_duration=to_float(data.get("targetduration")),
        duration=sum(s.duration for s in segments) if segments else None,
        type=_manifest_type(data),
        encrypted=_is_encrypted(data),
    )

    logger.debug(
        f"Parsed HLS {'master' if is_master else 'media'} playlist: "
        f"{len(variants)} variant(s), {len(segments or [])} segment(s)"
    )

    return ParsedManifest(
        format=ManifestFormat.HLS,
        raw=content,
        url=base_url,
        variants=variants,
        metadata=metadata,
        segments=segments,
    )


def _build_variant(index: int, playlist: Dict[str, Any], base_url: str) -> Variant:
    info = playlist.get("stream_info") or {}

    resolution = _parse_resolution(get_attr(info, "RESOLUTION"))
    codecs = split_codecs(get_attr(info, "CODECS"))
    frame_rate = to_float(get_attr(info, "FRAME-RATE"))

    return Variant(
        id=f"variant-{index}",
        bitrate=to_bitrate(get_attr(info, "BANDWIDTH", "AVERAGE-BANDWIDTH")),
        resolution=resolution,
        codecs=codecs,
        frame_rate=frame_rate if frame_rate and frame_rate > 0 else None,
        url=resolve_url(playlist.get("uri") or "", base_url),
        type=infer_variant_type(codecs, has_resolution=resolution is not None),
    )


def _parse_resolution(value: Any) -> Optional[Resolution]:
    if not value:
        return None
    if isinstance(value, (tuple, list)) and len(value) == 2:
        width, height = value
    else:
        width, sep, height = str(value).strip('"').lower().partition("x")
        if not sep:
            return None
    try:
        return Resolution(width=int(width), height=int(height))
    except (TypeError, ValueError):
        logger.debug(f"Ignoring unparseable RESOLUTION {value!r}")
        return None


def _build_segments(data: Dict[str, Any], base_url: str) -> List[Segment]:
    media_sequence = to_int(data.get("media_sequence"))
    # Where the last sub-range of each resource ended, for BYTERANGE without offset
    range_ends: Dict[str, int] = {}
    segments = []

    for index, raw in enumerate(data.get("segments") or []):
        url = resolve_url(raw.get("uri") or "", base_url)
        byte_range = _parse_byte_range(raw.get("byterange"), url, range_ends)
        segments.append(Segment(
            id=f"segment-{index}",
            duration=to_float(raw.get("duration")) or 0.0,
            url=url,
            byte_range=byte_range,
            sequence=media_sequence + index,
        ))

    return segments


def _parse_byte_range(byterange: Optional[str], url: str, range_ends: Dict[str, int]) -> Optional[ByteRange]:
    """``<length>[@<offset>]`` -> ``[offset, offset + length)``."""
    if not byterange:
        return None

    length, _, offset = str(byterange).partition("@")
    try:
        length = int(length)
        start = int(offset) if offset else range_ends.get(url, 0)
    except ValueError:
        logger.debug(f"Ignoring unparseable BYTERANGE {byterange!r}")
        return None

    range_ends[url] = start + length
    return ByteRange(start=start, end=start + length)


def _manifest_type(data: Dict[str, Any]) -> ManifestType:
    if data.get("is_endlist"):
        return ManifestType.VOD
    if str(data.get("playlist_type") or "").upper() == "EVENT":
        return ManifestType.EVENT
    return ManifestType.LIVE


def _is_encrypted(data: Dict[str, Any]) -> bool:
    for segment in data.get("segments") or []:
        key = segment.get("key")
        if not key:
            continue
        method = get_attr(key, "METHOD") if isinstance(key, dict) else getattr(key, "method", None)
        if method and str(method).upper() != "NONE":
            return True
    return False
