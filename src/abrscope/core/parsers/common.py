import re
from typing import Iterable, Optional

from abrscope.core.models import VariantType

VIDEO_CODECS_RE = re.compile(r"avc1|hvc1|hev1|vp0?9|av01", re.IGNORECASE)
AUDIO_CODECS_RE = re.compile(r"mp4a|ac-3|ec-3|opus", re.IGNORECASE)
SUBTITLE_CODECS_RE = re.compile(r"wvtt|stpp", re.IGNORECASE)


def variant_type_from_mime(mime_type: Optional[str]) -> Optional[VariantType]:
    if not mime_type:
        return None
    mime_type = mime_type.lower()
    if "video" in mime_type:
        return VariantType.VIDEO
    if "audio" in mime_type:
        return VariantType.AUDIO
    if "text" in mime_type or "subtitle" in mime_type:
        return VariantType.SUBTITLE
    return None


def variant_type_from_codecs(codecs: Iterable[str]) -> Optional[VariantType]:
    joined = ",".join(codecs)
    if VIDEO_CODECS_RE.search(joined):
        return VariantType.VIDEO
    if AUDIO_CODECS_RE.search(joined):
        return VariantType.AUDIO
    if SUBTITLE_CODECS_RE.search(joined):
        return VariantType.SUBTITLE
    return None


def infer_variant_type(codecs: Iterable[str], has_resolution: bool,
                       mime_type: Optional[str] = None) -> VariantType:
    """MIME type first, then codec signature, then resolution => video, else audio."""
    return (
        variant_type_from_mime(mime_type)
        or variant_type_from_codecs(codecs)
        or (VariantType.VIDEO if has_resolution else VariantType.AUDIO)
    )
