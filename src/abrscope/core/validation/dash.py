import logging

from abrscope.core.models import ParsedManifest, ValidationResult
from abrscope.core.validation import dash_rules
from abrscope.core.validation.rules import RuleContext

logger = logging.getLogger(__name__)


def validate_dash(manifest: ParsedManifest, raw_content: str) -> ValidationResult:
    """Check an MPD against ISO/IEC 23009-1 and the DASH-IF interoperability points."""
    mpd_type = dash_rules.detect_mpd_type(raw_content)
    playlist_type = f"mpd-{mpd_type}"

    context = RuleContext(content=raw_content, playlist_type=playlist_type, manifest=manifest)
    issues = dash_rules.catalog.run(context)

    result = ValidationResult.from_issues(
        issues,
        playlist_type=playlist_type,
        version=dash_rules.detect_profile(raw_content),
        detected_features=dash_rules.detect_features(raw_content, mpd_type),
        checked_rules=dash_rules.catalog.codes,
    )
    logger.info(
        f"DASH {playlist_type}: {len(result.errors)} error(s), "
        f"{len(result.warnings)} warning(s)"
    )
    return result
