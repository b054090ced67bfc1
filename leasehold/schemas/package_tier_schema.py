"""Pydantic schemas for Package Tiers."""

from typing import Optional, Dict, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from leasehold.models.enums import PackageType


class PackageTierCreateSchema(BaseModel):
    """Schema for creating a package tier."""

    tier_name: str = Field(..., min_length=1, max_length=100, description="Tier name (e.g., Professional)")
    tier_slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9_-]+$", description="Unique slug")
    display_name: str = Field(..., min_length=1, max_length=100, description="Human-readable tier name")
    description: Optional[str] = Field(None, description="Tier description")
    package_type: PackageType = Field(default=PackageType.SINGLE_COMPANY)
    monthly_price_cents: int = Field(..., ge=0, description="Monthly price in cents")
    annual_price_cents: int = Field(..., ge=0, description="Annual price in cents")
    currency: str = Field(default="CAD", min_length=3, max_length=3)
    max_businesses: int = Field(default=1, ge=0)
    max_properties: int = Field(..., ge=0, description="999999 means unlimited")
    max_units: int = Field(default=0, ge=0)
    max_tenants: int = Field(..., ge=0)
    max_users: int = Field(default=1, ge=0)
    max_payment_methods: int = Field(default=1, ge=0)
    features: Dict[str, bool] = Field(default_factory=dict, description="Feature flags")
    is_active: bool = Field(default=True)
    is_featured: bool = Field(default=False)
    display_order: int = Field(default=0)


class PackageTierUpdateSchema(BaseModel):
    """
    Schema for updating a package tier.

    ``expected_version`` enables optimistic concurrency: the edit is
    rejected if the tier was changed since the caller read it.
    """

    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    monthly_price_cents: Optional[int] = Field(None, ge=0)
    annual_price_cents: Optional[int] = Field(None, ge=0)
    max_businesses: Optional[int] = Field(None, ge=0)
    max_properties: Optional[int] = Field(None, ge=0)
    max_units: Optional[int] = Field(None, ge=0)
    max_tenants: Optional[int] = Field(None, ge=0)
    max_users: Optional[int] = Field(None, ge=0)
    max_payment_methods: Optional[int] = Field(None, ge=0)
    features: Optional[Dict[str, bool]] = None
    is_featured: Optional[bool] = None
    display_order: Optional[int] = None
    expected_version: Optional[int] = Field(None, ge=1)
    change_notes: Optional[str] = None


class PackageTierResponseSchema(BaseModel):
    """Schema for package tier response."""

    id: int
    tier_name: str
    tier_slug: str
    display_name: str
    description: Optional[str]
    package_type: PackageType
    monthly_price_cents: int
    annual_price_cents: int
    currency: str
    max_businesses: int
    max_properties: int
    max_units: int
    max_tenants: int
    max_users: int
    max_payment_methods: int
    features: Optional[Dict[str, bool]] = None
    is_active: bool
    is_featured: bool
    display_order: int
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PackageTierListResponseSchema(BaseModel):
    """Schema for package tier list."""

    items: List[PackageTierResponseSchema]
    total: int


class PackageTierVersionResponseSchema(BaseModel):
    """Schema for a historical tier snapshot."""

    id: int
    package_tier_id: int
    version: int
    tier_name: str
    display_name: str
    monthly_price_cents: int
    annual_price_cents: int
    currency: str
    max_businesses: int
    max_properties: int
    max_units: int
    max_tenants: int
    max_users: int
    max_payment_methods: int
    features: Optional[Dict[str, bool]] = None
    change_notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
