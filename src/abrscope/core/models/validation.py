"""
Pydantic models for standards compliance results.
"""
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Severity = Literal["error", "warning", "info"]
PlaylistType = Literal["master", "media", "mpd-static", "mpd-dynamic"]


class ValidationIssue(BaseModel):
    code: str
    severity: Severity
    line: Optional[int] = None
    element: Optional[str] = None
    tag: Optional[str] = None
    attribute: Optional[str] = None
    message: str
    spec_reference: str = Field(..., alias='specReference')
    spec_url: Optional[str] = Field(None, alias='specUrl')
    suggestion: Optional[str] = None

    model_config = {"frozen": True, "populate_by_name": True}


class DetectedFeature(BaseModel):
    name: str
    min_version: Optional[int] = Field(None, alias='minVersion')
    detected: bool
    source_tag: Optional[str] = Field(None, alias='sourceTag')

    model_config = {"frozen": True, "populate_by_name": True}


class ValidationResult(BaseModel):
    compliant: bool
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    info: List[ValidationIssue] = []
    playlist_type: PlaylistType = Field(..., alias='playlistType')
    version: Optional[str] = None
    detected_features: List[DetectedFeature] = Field([], alias='detectedFeatures')
    checked_rules: List[str] = Field([], alias='checkedRules')
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def issues(self) -> List[ValidationIssue]:
        return [*self.errors, *self.warnings, *self.info]

    @classmethod
    def from_issues(cls, issues: List[ValidationIssue], **kwargs) -> "ValidationResult":
        """Partition ``issues`` by severity into a result."""
        errors = [i for i in issues if i.severity == "error"]
        warnings = [i for i in issues if i.severity == "warning"]
        info = [i for i in issues if i.severity == "info"]
        return cls(
            compliant=not errors,
            errors=errors,
            warnings=warnings,
            info=info,
            **kwargs,
        )
