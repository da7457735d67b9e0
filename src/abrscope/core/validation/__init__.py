from .hls import validate_hls
from .dash import validate_dash
from .quality import QualityIssue, lint_manifest, summarize

__all__ = [
    'QualityIssue',
    'lint_manifest',
    'summarize',
    'validate_dash',
    'validate_hls',
]
