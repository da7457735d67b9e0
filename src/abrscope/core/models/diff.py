from typing import List

from pydantic import BaseModel, Field

from .manifest import Variant


class ManifestDiff(BaseModel):
    variants_added: List[Variant] = Field([], alias='variantsAdded')
    variants_removed: List[Variant] = Field([], alias='variantsRemoved')
    variants_changed: List[Variant] = Field([], alias='variantsChanged')
    metadata_changed: bool = Field(False, alias='metadataChanged')
    has_changes: bool = Field(False, alias='hasChanges')

    model_config = {"frozen": True, "populate_by_name": True}
