"""Pydantic schemas for usage counts and limit checks."""

from typing import List
from pydantic import BaseModel, ConfigDict

from leasehold.models.enums import ResourceType


class UsageSnapshotSchema(BaseModel):
    """Active (non-deleted) resource counts for one organization."""

    businesses: int = 0
    properties: int = 0
    units: int = 0
    tenants: int = 0
    users: int = 0

    model_config = ConfigDict(frozen=True)

    def count_for(self, resource_type: ResourceType) -> int:
        return getattr(self, resource_type.usage_key)


class LimitViolationSchema(BaseModel):
    """Programmatic detail of one exceeded cap."""

    resource_type: ResourceType
    current: int
    max: int

    def display(self) -> str:
        """Human-readable form, e.g. ``Properties: 5/3``."""
        return f"{self.resource_type.label}: {self.current}/{self.max}"


class LimitCheckSchema(BaseModel):
    """Result of comparing usage against effective caps."""

    within_limits: bool
    violations: List[str]
    details: List[LimitViolationSchema]


class CanAddResponseSchema(BaseModel):
    organization_id: int
    resource_type: ResourceType
    can_add: bool
    current: int
    max: int
    unlimited: bool


class ResourceLimitStatusSchema(BaseModel):
    """Usage against cap for one resource, with the add-on breakdown."""

    resource_type: ResourceType
    current: int
    base_max: int
    addon_bonus: int
    max: int
    unlimited: bool
    percentage: float
    at_limit: bool


class LimitStatusSchema(BaseModel):
    organization_id: int
    resources: List[ResourceLimitStatusSchema]
