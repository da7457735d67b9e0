"""
Pydantic models for parsed HLS/DASH manifests.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .validation import ValidationResult


class ManifestFormat(Enum):
    HLS = "hls"
    DASH = "dash"


class ManifestType(Enum):
    VOD = "VOD"
    LIVE = "LIVE"
    EVENT = "EVENT"


class VariantType(Enum):
    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"


class Resolution(BaseModel):
    width: int
    height: int

    model_config = {"frozen": True}

    def __str__(self):
        return f"{self.width}x{self.height}"


class ByteRange(BaseModel):
    """Byte offsets inside a shared resource, ``end`` is exclusive."""

    start: int
    end: int

    model_config = {"frozen": True}


class Variant(BaseModel):
    id: str
    bitrate: int = 0
    resolution: Optional[Resolution] = None
    codecs: List[str] = []
    frame_rate: Optional[float] = Field(None, alias='frameRate')
    url: str
    type: VariantType

    model_config = {"frozen": True, "populate_by_name": True}


class Segment(BaseModel):
    id: str
    duration: float
    url: str
    byte_range: Optional[ByteRange] = Field(None, alias='byteRange')
    sequence: int

    model_config = {"frozen": True, "populate_by_name": True}


class ManifestMetadata(BaseModel):
    version: Optional[str] = None
    duration: Optional[float] = None
    target_duration: Optional[float] = Field(None, alias='targetDuration')
    min_buffer_time: Optional[float] = Field(None, alias='minBufferTime')
    type: ManifestType
    encrypted: bool = False
    profiles: Optional[List[str]] = None

    model_config = {"frozen": True, "populate_by_name": True}


class ParsedManifest(BaseModel):
    format: ManifestFormat
    raw: str
    url: str
    variants: List[Variant] = []
    metadata: ManifestMetadata
    segments: Optional[List[Segment]] = None
    validation: Optional[ValidationResult] = None

    model_config = {"frozen": True, "populate_by_name": True}

    def variants_of(self, variant_type: VariantType) -> List[Variant]:
        return [v for v in self.variants if v.type == variant_type]

    def with_validation(self, validation: ValidationResult) -> "ParsedManifest":
        """Return a copy of this manifest carrying ``validation``."""
        return self.model_copy(update={"validation": validation})
