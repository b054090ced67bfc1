"""Pydantic schemas for add-on products and purchases."""

from typing import Optional, List, Dict
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from leasehold.models.enums import AddonType, AddonPurchaseStatus


class AddonProductResponseSchema(BaseModel):
    """Schema for add-on product response."""

    id: int
    slug: str
    addon_type: AddonType
    display_name: str
    description: Optional[str] = None
    monthly_price_cents: int
    currency: str
    units_per_addon: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class AddonPurchaseCreateSchema(BaseModel):
    """
    Schema for purchasing an add-on.

    Quantity is validated by the service so that non-positive values
    surface as INVALID_QUANTITY.
    """

    addon_product_id: int = Field(..., gt=0)
    quantity: int = Field(default=1, description="Number of add-on units (must be > 0)")


class AddonQuantityUpdateSchema(BaseModel):
    quantity: int = Field(..., description="New number of add-on units (must be > 0)")


class AddonPurchaseResponseSchema(BaseModel):
    """Schema for add-on purchase response."""

    id: int
    organization_id: int
    addon_product_id: int
    addon_product: AddonProductResponseSchema
    quantity: int
    status: AddonPurchaseStatus
    purchase_date: datetime
    next_billing_date: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    in_effect: bool

    model_config = ConfigDict(from_attributes=True)


class AddonPurchaseListResponseSchema(BaseModel):
    items: List[AddonPurchaseResponseSchema]
    total: int


class LimitBreakdownSchema(BaseModel):
    """Base cap, add-on bonus and their sum for one resource."""

    base: int
    addon: int
    total: int
    unlimited: bool = False


class OrganizationLimitsSchema(BaseModel):
    organization_id: int
    # Keyed by resource type value ("business", "property", ...)
    limits: Dict[str, LimitBreakdownSchema]
