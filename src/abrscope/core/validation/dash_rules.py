"""
ISO/IEC 23009-1 and DASH-IF IOP rule catalog.
"""
import re
from typing import List, Optional
from xml.etree.ElementTree import ParseError, fromstring

from abrscope.core.models import DetectedFeature, ValidationIssue
from abrscope.core.validation.rules import RuleCatalog, RuleContext, line_at

catalog = RuleCatalog("dash")

_MPD_TYPE_RE = re.compile(r'<MPD\b[^>]*?\btype="([^"]+)"')
_MIN_BUFFER_TIME_RE = re.compile(r'minBufferTime="([^"]+)"')
_MIN_BUFFER_TIME_FORMAT_RE = re.compile(r"^PT[\d.]+S$")
_PROFILES_RE = re.compile(r'profiles="([^"]+)"')
_PERIOD_RE = re.compile(r"<Period\b")
_ADAPTATION_SET_RE = re.compile(r"<AdaptationSet\b[^>]*>")
_REPRESENTATION_RE = re.compile(r"<Representation\b[^>]*>")
_ID_ATTR_RE = re.compile(r"\sid=")
_BANDWIDTH_ATTR_RE = re.compile(r"\sbandwidth=")


def mpd_type_attribute(content: str) -> Optional[str]:
    match = _MPD_TYPE_RE.search(content)
    return match.group(1) if match else None


def detect_mpd_type(content: str) -> str:
    """``dynamic`` only when declared, everything else counts as ``static``."""
    return "dynamic" if mpd_type_attribute(content) == "dynamic" else "static"


def detect_profile(content: str) -> str:
    match = _PROFILES_RE.search(content)
    return match.group(1) if match else "unknown"


def detect_features(content: str, mpd_type: str) -> List[DetectedFeature]:
    return [
        DetectedFeature(
            name="Video On Demand (VOD)" if mpd_type == "static" else "Live Streaming",
            detected=True,
            source_tag="MPD@type",
        ),
        DetectedFeature(name="SegmentTemplate Addressing", detected="<SegmentTemplate" in content,
                        source_tag="SegmentTemplate"),
        DetectedFeature(name="SegmentList Addressing", detected="<SegmentList" in content,
                        source_tag="SegmentList"),
        DetectedFeature(name="SegmentBase Addressing", detected="<SegmentBase" in content,
                        source_tag="SegmentBase"),
        DetectedFeature(name="Multi-Period", detected=len(_PERIOD_RE.findall(content)) > 1,
                        source_tag="Period"),
        DetectedFeature(name="Content Protection (DRM)", detected="<ContentProtection" in content,
                        source_tag="ContentProtection"),
    ]


@catalog.rule("MPD_INVALID_XML")
def check_valid_xml(ctx: RuleContext) -> Optional[ValidationIssue]:
    try:
        fromstring(ctx.content.lstrip("\ufeff \t\r\n"))
    except (ParseError, ValueError) as e:
        line = None
        position = getattr(e, "position", None)
        if position:
            line = position[0]
        return ValidationIssue(
            code="MPD_INVALID_XML",
            severity="error",
            line=line,
            element="MPD",
            message=f"MPD is not valid XML: {e}",
            spec_reference="ISO/IEC 23009-1 § 5",
            suggestion="Fix XML syntax errors",
        )
    return None


@catalog.rule("MPD_TYPE_REQUIRED", "MPD_TYPE_INVALID")
def check_mpd_type(ctx: RuleContext) -> Optional[ValidationIssue]:
    mpd_type = mpd_type_attribute(ctx.content)

    if mpd_type is None:
        return ValidationIssue(
            code="MPD_TYPE_REQUIRED",
            severity="error",
            element="MPD",
            attribute="type",
            message="MPD element must have type attribute",
            spec_reference="ISO/IEC 23009-1 § 5.3.1.2",
            suggestion='Add type="static" for VOD or type="dynamic" for live',
        )

    if mpd_type not in ("static", "dynamic"):
        return ValidationIssue(
            code="MPD_TYPE_INVALID",
            severity="error",
            element="MPD",
            attribute="type",
            message=f'Invalid MPD type "{mpd_type}". Must be "static" or "dynamic"',
            spec_reference="ISO/IEC 23009-1 § 5.3.1.2",
            suggestion='Use type="static" or type="dynamic"',
        )

    return None


@catalog.rule("MIN_BUFFER_TIME_REQUIRED", "MIN_BUFFER_TIME_FORMAT")
def check_min_buffer_time(ctx: RuleContext) -> Optional[ValidationIssue]:
    match = _MIN_BUFFER_TIME_RE.search(ctx.content)

    if not match:
        return ValidationIssue(
            code="MIN_BUFFER_TIME_REQUIRED",
            severity="error",
            element="MPD",
            attribute="minBufferTime",
            message="MPD must have minBufferTime attribute",
            spec_reference="ISO/IEC 23009-1 § 5.3.1.2",
            suggestion='Add minBufferTime="PT2.0S" or similar ISO 8601 duration',
        )

    value = match.group(1)
    if not _MIN_BUFFER_TIME_FORMAT_RE.match(value):
        return ValidationIssue(
            code="MIN_BUFFER_TIME_FORMAT",
            severity="error",
            line=line_at(ctx.content, match.start()),
            element="MPD",
            attribute="minBufferTime",
            message=f'Invalid minBufferTime format: "{value}". Must be ISO 8601 duration',
            spec_reference="ISO/IEC 23009-1 § 5.3.1.2",
            suggestion="Use format PTnnn.nnnS (e.g., PT2.0S for 2 seconds)",
        )

    return None


@catalog.rule("PERIOD_REQUIRED")
def check_period_exists(ctx: RuleContext) -> Optional[ValidationIssue]:
    if _PERIOD_RE.search(ctx.content):
        return None
    return ValidationIssue(
        code="PERIOD_REQUIRED",
        severity="error",
        element="MPD",
        message="MPD must contain at least one Period element",
        spec_reference="ISO/IEC 23009-1 § 5.3.2",
        suggestion="Add <Period> element with AdaptationSets",
    )


@catalog.rule("ADAPTATION_SET_TYPE_REQUIRED")
def check_adaptation_set_type(ctx: RuleContext) -> List[ValidationIssue]:
    issues = []
    for index, match in enumerate(_ADAPTATION_SET_RE.finditer(ctx.content), 1):
        tag = match.group(0)
        if "mimeType=" in tag or "contentType=" in tag:
            continue
        issues.append(ValidationIssue(
            code="ADAPTATION_SET_TYPE_REQUIRED",
            severity="error",
            line=line_at(ctx.content, match.start()),
            element="AdaptationSet",
            message=f"AdaptationSet #{index} must have either mimeType or contentType attribute",
            spec_reference="ISO/IEC 23009-1 § 5.3.3",
            suggestion='Add mimeType="video/mp4" or contentType="video"',
        ))
    return issues


@catalog.rule("REPRESENTATION_ID_REQUIRED", "REPRESENTATION_BANDWIDTH_REQUIRED")
def check_representation_attributes(ctx: RuleContext) -> List[ValidationIssue]:
    issues = []
    for index, match in enumerate(_REPRESENTATION_RE.finditer(ctx.content), 1):
        tag = match.group(0)
        line = line_at(ctx.content, match.start())

        if not _ID_ATTR_RE.search(tag):
            issues.append(ValidationIssue(
                code="REPRESENTATION_ID_REQUIRED",
                severity="error",
                line=line,
                element="Representation",
                attribute="id",
                message=f"Representation #{index} must have id attribute",
                spec_reference="ISO/IEC 23009-1 § 5.3.5",
                suggestion='Add id="1" or similar unique identifier',
            ))

        if not _BANDWIDTH_ATTR_RE.search(tag):
            issues.append(ValidationIssue(
                code="REPRESENTATION_BANDWIDTH_REQUIRED",
                severity="error",
                line=line,
                element="Representation",
                attribute="bandwidth",
                message=f"Representation #{index} must have bandwidth attribute",
                spec_reference="ISO/IEC 23009-1 § 5.3.5",
                suggestion='Add bandwidth="1000000" (bitrate in bits per second)',
            ))
    return issues


@catalog.rule("ON_DEMAND_TYPE_STATIC", "ON_DEMAND_DURATION_REQUIRED")
def check_on_demand_profile(ctx: RuleContext) -> List[ValidationIssue]:
    match = _PROFILES_RE.search(ctx.content)
    if not match or "isoff-on-demand" not in match.group(1):
        return []

    issues = []
    if mpd_type_attribute(ctx.content) != "static":
        issues.append(ValidationIssue(
            code="ON_DEMAND_TYPE_STATIC",
            severity="error",
            element="MPD",
            attribute="type",
            message='isoff-on-demand profile requires type="static"',
            spec_reference="DASH-IF IOP § 3.2.2",
            suggestion='Change type to "static" for VOD content',
        ))

    if "mediaPresentationDuration=" not in ctx.content:
        issues.append(ValidationIssue(
            code="ON_DEMAND_DURATION_REQUIRED",
            severity="error",
            element="MPD",
            attribute="mediaPresentationDuration",
            message="isoff-on-demand profile requires mediaPresentationDuration",
            spec_reference="DASH-IF IOP § 3.2.2",
            suggestion='Add mediaPresentationDuration="PT634.566S" or appropriate duration',
        ))
    return issues
