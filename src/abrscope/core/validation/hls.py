import logging

from abrscope.core.models import ParsedManifest, ValidationResult
from abrscope.core.validation import hls_rules
from abrscope.core.validation.rules import RuleContext

logger = logging.getLogger(__name__)


def validate_hls(manifest: ParsedManifest, raw_content: str) -> ValidationResult:
    """
    Check an HLS playlist against RFC 8216.

    Args:
        manifest:    Parsed manifest (kept for cross-referencing).
        raw_content: Original playlist text, used for line numbers.

    Returns:
        ValidationResult with issues partitioned by severity.
    """
    playlist_type = hls_rules.detect_playlist_type(raw_content)
    version = hls_rules.detect_version(raw_content)

    context = RuleContext(content=raw_content, playlist_type=playlist_type, manifest=manifest)
    issues = hls_rules.catalog.run(context)

    result = ValidationResult.from_issues(
        issues,
        playlist_type=playlist_type,
        version=f"HLS v{version}",
        detected_features=hls_rules.detect_features(raw_content),
        checked_rules=hls_rules.catalog.codes,
    )
    logger.info(
        f"HLS {playlist_type} playlist: {len(result.errors)} error(s), "
        f"{len(result.warnings)} warning(s)"
    )
    return result
