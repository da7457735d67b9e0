"""
RFC 8216 rule catalog.

Every rule works on the raw playlist text so issues can point at a line.
"""
import re
import string
from typing import List, Optional

from abrscope.core.models import DetectedFeature, ValidationIssue
from abrscope.core.validation.rules import RuleCatalog, RuleContext, line_at

RFC_URL = "https://datatracker.ietf.org/doc/html/rfc8216"

catalog = RuleCatalog("hls")

_VERSION_RE = re.compile(r"#EXT-X-VERSION:(\d+)")
_STREAM_INF_BANDWIDTH_RE = re.compile(r"[:,]\s*BANDWIDTH=")
_CODECS_RE = re.compile(r'CODECS="([^"]+)"')
_EXTINF_DURATION_RE = re.compile(r"#EXTINF:\s*(-?[\d.]+)")
_BANDWIDTH_RE = re.compile(r"BANDWIDTH=(-?\d+)")
_KEY_RE = re.compile(r"#EXT-X-KEY:(.+)")
_KEY_METHOD_RE = re.compile(r"METHOD=([A-Z0-9-]+)")
_KEY_IV_RE = re.compile(r"^#EXT-X-KEY:.*?\bIV=", re.MULTILINE)
_H264_SUFFIX_RE = re.compile(r"^[0-9A-Fa-f]{6}$")
_AAC_OBJECT_TYPE_RE = re.compile(r"^\d{1,2}$")

VALID_KEY_METHODS = ("NONE", "AES-128", "SAMPLE-AES")

# (pattern, tag, minimum EXT-X-VERSION)
VERSION_FEATURES = [
    (re.compile(r"#EXTINF:\d+\.\d+"), "EXTINF (floating-point)", 3),
    (re.compile(r"#EXT-X-BYTERANGE"), "EXT-X-BYTERANGE", 4),
    (re.compile(r"#EXT-X-I-FRAMES-ONLY"), "EXT-X-I-FRAMES-ONLY", 4),
    (re.compile(r"#EXT-X-MAP"), "EXT-X-MAP", 5),
    (re.compile(r"#EXT-X-INDEPENDENT-SEGMENTS"), "EXT-X-INDEPENDENT-SEGMENTS", 6),
    (re.compile(r"#EXT-X-START"), "EXT-X-START", 6),
]

# (name, pattern, minimum version, tag)
FEATURES = [
    ("Independent Segments", re.compile(r"#EXT-X-INDEPENDENT-SEGMENTS"), 6, "EXT-X-INDEPENDENT-SEGMENTS"),
    ("Byte Range Support", re.compile(r"#EXT-X-BYTERANGE"), 4, "EXT-X-BYTERANGE"),
    ("I-Frame Playlists", re.compile(r"#EXT-X-I-FRAMES-ONLY"), 4, "EXT-X-I-FRAMES-ONLY"),
    ("Initialization Segments (fMP4)", re.compile(r"#EXT-X-MAP"), 5, "EXT-X-MAP"),
    ("AES-128 Encryption", re.compile(r"#EXT-X-KEY:.*METHOD=AES-128"), 1, "EXT-X-KEY"),
    ("SAMPLE-AES Encryption", re.compile(r"#EXT-X-KEY:.*METHOD=SAMPLE-AES"), 5, "EXT-X-KEY"),
    ("Program Date-Time", re.compile(r"#EXT-X-PROGRAM-DATE-TIME"), 1, "EXT-X-PROGRAM-DATE-TIME"),
    ("Discontinuity", re.compile(r"#EXT-X-DISCONTINUITY"), 1, "EXT-X-DISCONTINUITY"),
]


def _trim(text: str) -> str:
    return text.strip(string.whitespace + "\ufeff")


def detect_playlist_type(content: str) -> str:
    """``master`` when EXT-X-STREAM-INF is present, ``media`` for EXTINF, else ``master``."""
    if "#EXT-X-STREAM-INF" in content:
        return "master"
    if "#EXTINF" in content:
        return "media"
    return "master"


def detect_version(content: str) -> int:
    match = _VERSION_RE.search(content)
    return int(match.group(1)) if match else 1


def detect_features(content: str) -> List[DetectedFeature]:
    return [
        DetectedFeature(name=name, min_version=version, detected=bool(pattern.search(content)), source_tag=tag)
        for name, pattern, version, tag in FEATURES
    ]


# ── Structure ────────────────────────────────────────────────────────────────

@catalog.rule("EXTM3U_FIRST_LINE")
def check_extm3u_first_line(ctx: RuleContext) -> Optional[ValidationIssue]:
    first_line = _trim(_trim(ctx.content).split("\n")[0])
    if first_line == "#EXTM3U":
        return None
    return ValidationIssue(
        code="EXTM3U_FIRST_LINE",
        severity="error",
        line=1,
        tag="EXTM3U",
        message="First line must be #EXTM3U",
        spec_reference="RFC 8216 § 4.3.1.1",
        spec_url=f"{RFC_URL}#section-4.3.1.1",
        suggestion="Add #EXTM3U as the first line of the playlist",
    )


@catalog.rule("UTF8_NO_BOM")
def check_no_bom(ctx: RuleContext) -> Optional[ValidationIssue]:
    if not ctx.content.startswith("\ufeff"):
        return None
    return ValidationIssue(
        code="UTF8_NO_BOM",
        severity="error",
        line=1,
        message="Playlist contains Byte Order Mark (BOM) which must be removed",
        spec_reference="RFC 8216 § 4.1",
        spec_url=f"{RFC_URL}#section-4.1",
        suggestion="Save file as UTF-8 without BOM",
    )


@catalog.rule("MIXED_PLAYLIST_TYPES")
def check_no_mixed_playlist_types(ctx: RuleContext) -> Optional[ValidationIssue]:
    if "#EXT-X-STREAM-INF" not in ctx.content or "#EXTINF" not in ctx.content:
        return None
    return ValidationIssue(
        code="MIXED_PLAYLIST_TYPES",
        severity="error",
        message=(
            "Playlist contains both Master Playlist tags (EXT-X-STREAM-INF) "
            "and Media Playlist tags (EXTINF)"
        ),
        spec_reference="RFC 8216 § 4.1",
        suggestion="A playlist must be either a Master Playlist or a Media Playlist, not both",
    )


# ── Media playlists ──────────────────────────────────────────────────────────

@catalog.rule("MEDIA_TARGETDURATION_REQUIRED")
def check_media_target_duration(ctx: RuleContext) -> Optional[ValidationIssue]:
    if ctx.playlist_type != "media" or "#EXT-X-TARGETDURATION" in ctx.content:
        return None
    return ValidationIssue(
        code="MEDIA_TARGETDURATION_REQUIRED",
        severity="error",
        tag="EXT-X-TARGETDURATION",
        message="Media Playlist must have #EXT-X-TARGETDURATION tag",
        spec_reference="RFC 8216 § 4.3.3.1",
        spec_url=f"{RFC_URL}#section-4.3.3.1",
        suggestion="Add #EXT-X-TARGETDURATION:<seconds> (e.g., #EXT-X-TARGETDURATION:10)",
    )


@catalog.rule("EXTINF_BEFORE_SEGMENT")
def check_extinf_before_segments(ctx: RuleContext) -> List[ValidationIssue]:
    if ctx.playlist_type != "media":
        return []

    issues = []
    last_extinf = -1
    for index, line in enumerate(ctx.content.split("\n")):
        trimmed = _trim(line)
        if not trimmed or trimmed.startswith("#"):
            if trimmed.startswith("#EXTINF"):
                last_extinf = index
            continue

        # URI line: the EXTINF must sit on the line right above it
        if last_extinf != index - 1:
            issues.append(ValidationIssue(
                code="EXTINF_BEFORE_SEGMENT",
                severity="error",
                line=index + 1,
                tag="EXTINF",
                message="Media segment must be preceded by #EXTINF tag",
                spec_reference="RFC 8216 § 4.3.2.1",
                spec_url=f"{RFC_URL}#section-4.3.2.1",
                suggestion="Add #EXTINF:<duration>,<title> on the line before this segment URL",
            ))
    return issues


# ── Master playlists ─────────────────────────────────────────────────────────

def _stream_inf_lines(content: str):
    for index, line in enumerate(content.split("\n")):
        if line.startswith("#EXT-X-STREAM-INF"):
            yield index + 1, line


@catalog.rule("STREAM_INF_BANDWIDTH_REQUIRED")
def check_stream_inf_bandwidth(ctx: RuleContext) -> List[ValidationIssue]:
    return [
        ValidationIssue(
            code="STREAM_INF_BANDWIDTH_REQUIRED",
            severity="error",
            line=line_no,
            tag="EXT-X-STREAM-INF",
            attribute="BANDWIDTH",
            message="#EXT-X-STREAM-INF must include BANDWIDTH attribute",
            spec_reference="RFC 8216 § 4.3.4.2",
            spec_url=f"{RFC_URL}#section-4.3.4.2",
            suggestion="Add BANDWIDTH=<bitrate> (e.g., BANDWIDTH=2000000)",
        )
        for line_no, line in _stream_inf_lines(ctx.content)
        if not _STREAM_INF_BANDWIDTH_RE.search(line)
    ]


@catalog.rule("STREAM_INF_CODECS_RECOMMENDED")
def check_stream_inf_codecs(ctx: RuleContext) -> List[ValidationIssue]:
    return [
        ValidationIssue(
            code="STREAM_INF_CODECS_RECOMMENDED",
            severity="warning",
            line=line_no,
            tag="EXT-X-STREAM-INF",
            attribute="CODECS",
            message="#EXT-X-STREAM-INF should include CODECS attribute for better compatibility",
            spec_reference="RFC 8216 § 4.3.4.2",
            spec_url=f"{RFC_URL}#section-4.3.4.2",
            suggestion='Add CODECS="avc1.4d401e,mp4a.40.2" or appropriate codec strings',
        )
        for line_no, line in _stream_inf_lines(ctx.content)
        if "CODECS=" not in line
    ]


# ── Version compatibility ────────────────────────────────────────────────────

@catalog.rule("VERSION_FEATURE_MISMATCH")
def check_version_compatibility(ctx: RuleContext) -> List[ValidationIssue]:
    declared = detect_version(ctx.content)
    issues = []
    for pattern, tag, min_version in VERSION_FEATURES:
        if declared >= min_version:
            continue
        match = pattern.search(ctx.content)
        if not match:
            continue
        issues.append(ValidationIssue(
            code="VERSION_FEATURE_MISMATCH",
            severity="error",
            line=line_at(ctx.content, match.start()),
            tag=tag,
            message=f"{tag} requires HLS version {min_version}+, but version {declared} is declared",
            spec_reference="RFC 8216 § 7",
            spec_url=f"{RFC_URL}#section-7",
            suggestion=f"Change #EXT-X-VERSION to {min_version} or higher",
        ))
    return issues


# ── Codecs ───────────────────────────────────────────────────────────────────

def check_codec(codec: str, line: int) -> Optional[ValidationIssue]:
    """RFC 6381 sanity check for one codec token. HEVC is only length-checked."""
    if codec.startswith("avc1.") and not _H264_SUFFIX_RE.match(codec[5:]):
        return ValidationIssue(
            code="INVALID_H264_CODEC",
            severity="error",
            line=line,
            attribute="CODECS",
            message=f'Invalid H.264 codec string: "{codec}". Expected format: avc1.[6 hex digits]',
            spec_reference="RFC 6381 § 3.3",
            suggestion="Use format like avc1.4d401e (Main Profile Level 3.0)",
        )

    if codec.startswith("mp4a.40.") and not _AAC_OBJECT_TYPE_RE.match(codec[8:]):
        return ValidationIssue(
            code="INVALID_AAC_CODEC",
            severity="error",
            line=line,
            attribute="CODECS",
            message=f'Invalid AAC codec string: "{codec}". Expected format: mp4a.40.[1-2 digits]',
            spec_reference="RFC 6381 § 3.3",
            suggestion="Use format like mp4a.40.2 (AAC-LC)",
        )

    if codec.startswith(("hvc1.", "hev1.")) and len(codec) < 10:
        return ValidationIssue(
            code="INVALID_HEVC_CODEC",
            severity="warning",
            line=line,
            attribute="CODECS",
            message=f'H.265 codec string may be invalid: "{codec}"',
            spec_reference="RFC 6381 § 3.4",
        )

    return None


@catalog.rule("INVALID_H264_CODEC", "INVALID_AAC_CODEC", "INVALID_HEVC_CODEC")
def check_codec_strings(ctx: RuleContext) -> List[ValidationIssue]:
    issues = []
    for match in _CODECS_RE.finditer(ctx.content):
        line = line_at(ctx.content, match.start())
        for codec in match.group(1).split(","):
            issue = check_codec(codec.strip(), line)
            if issue:
                issues.append(issue)
    return issues


# ── Values ───────────────────────────────────────────────────────────────────

@catalog.rule("EXTINF_DURATION_POSITIVE")
def check_extinf_duration(ctx: RuleContext) -> List[ValidationIssue]:
    if ctx.playlist_type != "media":
        return []

    issues = []
    for match in _EXTINF_DURATION_RE.finditer(ctx.content):
        try:
            duration = float(match.group(1))
        except ValueError:
            continue
        if duration > 0:
            continue
        issues.append(ValidationIssue(
            code="EXTINF_DURATION_POSITIVE",
            severity="error",
            line=line_at(ctx.content, match.start()),
            tag="EXTINF",
            message=f"EXTINF duration must be greater than 0, found: {match.group(1)}",
            spec_reference="RFC 8216 § 4.3.2.1",
            spec_url=f"{RFC_URL}#section-4.3.2.1",
            suggestion="Use a positive duration value",
        ))
    return issues


@catalog.rule("BANDWIDTH_POSITIVE")
def check_bandwidth_positive(ctx: RuleContext) -> List[ValidationIssue]:
    return [
        ValidationIssue(
            code="BANDWIDTH_POSITIVE",
            severity="error",
            line=line_at(ctx.content, match.start()),
            attribute="BANDWIDTH",
            message=f"BANDWIDTH must be greater than 0, found: {int(match.group(1))}",
            spec_reference="RFC 8216 § 4.3.4.2",
            spec_url=f"{RFC_URL}#section-4.3.4.2",
            suggestion="Use a positive bandwidth value in bits per second",
        )
        for match in _BANDWIDTH_RE.finditer(ctx.content)
        if int(match.group(1)) <= 0
    ]


# ── Encryption ───────────────────────────────────────────────────────────────

@catalog.rule("KEY_METHOD_REQUIRED", "KEY_METHOD_INVALID", "KEY_URI_REQUIRED")
def check_key_method(ctx: RuleContext) -> List[ValidationIssue]:
    issues = []
    for match in _KEY_RE.finditer(ctx.content):
        attributes = match.group(1)
        line = line_at(ctx.content, match.start())

        method_match = _KEY_METHOD_RE.search(attributes)
        if not method_match:
            issues.append(ValidationIssue(
                code="KEY_METHOD_REQUIRED",
                severity="error",
                line=line,
                tag="EXT-X-KEY",
                attribute="METHOD",
                message="EXT-X-KEY must have METHOD attribute",
                spec_reference="RFC 8216 § 4.3.2.4",
                spec_url=f"{RFC_URL}#section-4.3.2.4",
                suggestion="Add METHOD=AES-128 or METHOD=NONE",
            ))
            continue

        method = method_match.group(1)
        if method not in VALID_KEY_METHODS:
            issues.append(ValidationIssue(
                code="KEY_METHOD_INVALID",
                severity="error",
                line=line,
                tag="EXT-X-KEY",
                attribute="METHOD",
                message=f'Invalid METHOD="{method}". Must be NONE, AES-128, or SAMPLE-AES',
                spec_reference="RFC 8216 § 4.3.2.4",
                spec_url=f"{RFC_URL}#section-4.3.2.4",
                suggestion="Use METHOD=AES-128 for encryption or METHOD=NONE for no encryption",
            ))

        if method != "NONE" and "URI=" not in attributes:
            issues.append(ValidationIssue(
                code="KEY_URI_REQUIRED",
                severity="error",
                line=line,
                tag="EXT-X-KEY",
                attribute="URI",
                message="EXT-X-KEY with METHOD other than NONE must have URI attribute",
                spec_reference="RFC 8216 § 4.3.2.4",
                spec_url=f"{RFC_URL}#section-4.3.2.4",
                suggestion='Add URI="https://example.com/key"',
            ))
    return issues


@catalog.rule("IV_REQUIRES_VERSION_2")
def check_iv_version(ctx: RuleContext) -> Optional[ValidationIssue]:
    declared = detect_version(ctx.content)
    if declared >= 2:
        return None
    match = _KEY_IV_RE.search(ctx.content)
    if not match:
        return None
    return ValidationIssue(
        code="IV_REQUIRES_VERSION_2",
        severity="error",
        line=line_at(ctx.content, match.start()),
        attribute="IV",
        message="IV attribute in EXT-X-KEY requires HLS version 2+",
        spec_reference="RFC 8216 § 4.3.2.4",
        spec_url=f"{RFC_URL}#section-4.3.2.4",
        suggestion="Add #EXT-X-VERSION:2 or higher",
    )
