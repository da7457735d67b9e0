"""
Best-practice lint over a parsed manifest.

Unlike the standards validators this works on the normalized model, so the same
checks apply to HLS and DASH.
"""
import logging
from typing import List, Literal

from pydantic import BaseModel

from abrscope.core.models import ManifestType, ParsedManifest, Severity, VariantType

logger = logging.getLogger(__name__)

Category = Literal["variants", "codecs", "metadata", "abr-ladder"]

MIN_LADDER_RUNGS = 3


class QualityIssue(BaseModel):
    severity: Severity
    message: str
    category: Category

    model_config = {"frozen": True}


def lint_manifest(manifest: ParsedManifest) -> List[QualityIssue]:
    issues: List[QualityIssue] = []

    if not manifest.variants:
        issues.append(QualityIssue(severity="error", message="No variants found in manifest",
                                   category="variants"))
        return issues

    video = manifest.variants_of(VariantType.VIDEO)
    if not video:
        issues.append(QualityIssue(severity="warning", message="No video variants found",
                                   category="variants"))
    else:
        issues.extend(_lint_ladder(video))

    if (
        manifest.metadata.type == ManifestType.LIVE
        and manifest.segments
        and not manifest.metadata.target_duration
    ):
        issues.append(QualityIssue(severity="warning", message="LIVE manifest should have target duration",
                                   category="metadata"))

    if manifest.metadata.encrypted:
        issues.append(QualityIssue(severity="info", message="Manifest contains encrypted content (DRM)",
                                   category="metadata"))

    logger.debug(f"Quality lint found {len(issues)} issue(s)")
    return issues


def _lint_ladder(video) -> List[QualityIssue]:
    issues = []

    if len(video) < MIN_LADDER_RUNGS:
        issues.append(QualityIssue(
            severity="warning",
            message=f"Only {len(video)} video variant(s). Recommended: 4-6 variants for optimal ABR",
            category="abr-ladder",
        ))

    bitrates = [v.bitrate for v in video]
    if len(set(bitrates)) != len(bitrates):
        issues.append(QualityIssue(severity="warning", message="Multiple variants have the same bitrate",
                                   category="abr-ladder"))

    if any(v.resolution is None for v in video):
        issues.append(QualityIssue(severity="warning",
                                   message="Some video variants are missing resolution information",
                                   category="variants"))

    for index, variant in enumerate(video, 1):
        if not variant.codecs:
            issues.append(QualityIssue(severity="warning",
                                       message=f"Variant {index} is missing codec information",
                                       category="codecs"))

    ordered = sorted(bitrates)
    gaps = [high - low for low, high in zip(ordered, ordered[1:])]
    if gaps:
        mean_gap = sum(gaps) / len(gaps)
        for index, gap in enumerate(gaps, 1):
            if gap > mean_gap * 2:
                issues.append(QualityIssue(
                    severity="info",
                    message=f"Large gap detected between variant {index} and {index + 1}: {gap / 1_000_000:.2f} Mbps",
                    category="abr-ladder",
                ))

    return issues


def summarize(issues: List[QualityIssue]) -> dict:
    """Count issues per severity. ``healthy`` is 1 when there are no errors."""
    counts = {severity: 0 for severity in ("error", "warning", "info")}
    for issue in issues:
        counts[issue.severity] += 1
    return {
        "errors": counts["error"],
        "warnings": counts["warning"],
        "info": counts["info"],
        "healthy": counts["error"] == 0,
    }
