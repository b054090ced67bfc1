"""Pydantic schemas for the feature gate."""

from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from leasehold.models.enums import FeatureStatus, UpgradeType, AddonType


class FeatureCatalogEntrySchema(BaseModel):
    """Static metadata for a gated feature."""

    key: str
    name: str
    description: str
    benefits: List[str] = Field(default_factory=list)
    upgrade_type: UpgradeType
    min_tier: Optional[str] = None
    addon_type: Optional[AddonType] = None

    model_config = ConfigDict(frozen=True)


class FeatureStatusSchema(BaseModel):
    feature_key: str
    status: FeatureStatus
    name: Optional[str] = None
    description: Optional[str] = None
    upgrade_type: Optional[UpgradeType] = None
    min_tier: Optional[str] = None


class FeatureStatusListSchema(BaseModel):
    organization_id: int
    features: List[FeatureStatusSchema]
