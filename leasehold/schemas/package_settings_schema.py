"""Pydantic schemas for organization package settings and effective settings."""

from typing import Optional, Dict
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, model_validator

from leasehold.models.enums import BillingCycle, ResourceType
from leasehold.schemas.package_tier_schema import PackageTierResponseSchema


class PackageSettingsUpdateSchema(BaseModel):
    """
    Schema for creating or updating an organization's package settings.

    Only fields present in the payload are applied; an explicit ``null``
    on a ``custom_*`` field clears that override.
    """

    package_tier_id: Optional[int] = Field(None, gt=0)
    package_tier_slug: Optional[str] = Field(None, min_length=1)
    custom_monthly_price_cents: Optional[int] = Field(None, ge=0)
    custom_annual_price_cents: Optional[int] = Field(None, ge=0)
    custom_max_businesses: Optional[int] = Field(None, ge=0)
    custom_max_properties: Optional[int] = Field(None, ge=0)
    custom_max_units: Optional[int] = Field(None, ge=0)
    custom_max_tenants: Optional[int] = Field(None, ge=0)
    custom_max_users: Optional[int] = Field(None, ge=0)
    custom_max_payment_methods: Optional[int] = Field(None, ge=0)
    custom_features: Optional[Dict[str, bool]] = None
    override_notes: Optional[str] = None
    billing_cycle: Optional[BillingCycle] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None

    @model_validator(mode="after")
    def check_single_tier_reference(self):
        if self.package_tier_id is not None and self.package_tier_slug is not None:
            raise ValueError("Provide package_tier_id or package_tier_slug, not both")
        return self


class PackageSettingsResponseSchema(BaseModel):
    """Schema for an organization's stored package settings."""

    id: int
    organization_id: int
    package_tier_id: int
    package_version: int
    custom_monthly_price_cents: Optional[int] = None
    custom_annual_price_cents: Optional[int] = None
    custom_max_businesses: Optional[int] = None
    custom_max_properties: Optional[int] = None
    custom_max_units: Optional[int] = None
    custom_max_tenants: Optional[int] = None
    custom_max_users: Optional[int] = None
    custom_max_payment_methods: Optional[int] = None
    custom_features: Optional[Dict[str, bool]] = None
    has_custom_pricing: bool
    has_custom_limits: bool
    override_notes: Optional[str] = None
    billing_cycle: BillingCycle
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EffectiveSettingsSchema(BaseModel):
    """Merged tier + override values actually enforced. Immutable."""

    monthly_price_cents: int
    annual_price_cents: int
    max_businesses: int
    max_properties: int
    max_units: int
    max_tenants: int
    max_users: int
    max_payment_methods: int
    features: Dict[str, bool]

    model_config = ConfigDict(frozen=True)

    def cap_for(self, resource_type: ResourceType) -> int:
        return getattr(self, resource_type.cap_field)


class EffectivePackageSettingsSchema(BaseModel):
    """Resolver output: the tier, the override (if any) and the effective settings."""

    organization_id: int
    tier: PackageTierResponseSchema
    override: Optional[PackageSettingsResponseSchema] = None
    effective: EffectiveSettingsSchema
    uses_default_tier: bool = False

    model_config = ConfigDict(frozen=True)
