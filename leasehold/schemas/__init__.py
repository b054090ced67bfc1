"""Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class ErrorResponseSchema(BaseModel):
    """Schema for error responses."""

    error: str
    message: str
    status: int
    error_code: Optional[str] = None
    details: Optional[dict] = None


class HealthCheckSchema(BaseModel):
    """Schema for health check response."""

    status: str
    timestamp: datetime
    environment: str


class AppInfoSchema(BaseModel):
    """Schema for app info response."""

    name: str
    version: str
    environment: str
    debug: bool
    timestamp: datetime


from leasehold.schemas.package_tier_schema import (
    PackageTierCreateSchema,
    PackageTierUpdateSchema,
    PackageTierResponseSchema,
    PackageTierListResponseSchema,
    PackageTierVersionResponseSchema,
)

from leasehold.schemas.package_settings_schema import (
    PackageSettingsUpdateSchema,
    PackageSettingsResponseSchema,
    EffectiveSettingsSchema,
    EffectivePackageSettingsSchema,
)

from leasehold.schemas.usage_schema import (
    UsageSnapshotSchema,
    LimitViolationSchema,
    LimitCheckSchema,
    CanAddResponseSchema,
    ResourceLimitStatusSchema,
    LimitStatusSchema,
)

from leasehold.schemas.addon_schema import (
    AddonProductResponseSchema,
    AddonPurchaseCreateSchema,
    AddonQuantityUpdateSchema,
    AddonPurchaseResponseSchema,
    AddonPurchaseListResponseSchema,
    LimitBreakdownSchema,
    OrganizationLimitsSchema,
)

from leasehold.schemas.feature_schema import (
    FeatureCatalogEntrySchema,
    FeatureStatusSchema,
    FeatureStatusListSchema,
)

from leasehold.schemas.upgrade_notification_schema import (
    UpgradeNotificationResponseSchema,
    UpgradeNotificationRespondSchema,
)

from leasehold.schemas.portfolio_schema import (
    BusinessCreateSchema,
    PropertyCreateSchema,
    UnitCreateSchema,
    TenantAccessCreateSchema,
    MemberCreateSchema,
)
