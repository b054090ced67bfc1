"""Pydantic schemas for package upgrade notifications."""

from typing import Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from leasehold.models.enums import NotificationStatus


class UpgradeNotificationResponseSchema(BaseModel):
    id: int
    organization_id: int
    package_tier_id: int
    old_version: int
    new_version: int
    changes_summary: Optional[Dict[str, Any]] = None
    pricing_changed: bool
    limits_changed: bool
    features_changed: bool
    status: NotificationStatus
    notified_at: datetime
    responded_at: Optional[datetime] = None
    responded_by: Optional[str] = None
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UpgradeNotificationRespondSchema(BaseModel):
    """Accept moves the organization to the new tier version and drops its overrides."""

    accept: bool = Field(..., description="True to accept the new tier terms, False to decline")
