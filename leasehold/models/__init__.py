"""SQLAlchemy models package."""

from datetime import datetime
from leasehold import db


class BaseModel(db.Model):
    """Base model with common columns."""

    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        """String representation."""
        return f"<{self.__class__.__name__} id={self.id}>"


class AuditLog(BaseModel):
    """Audit log model for tracking changes."""

    __tablename__ = "audit_logs"

    action = db.Column(db.String(50), nullable=False, index=True)
    entity_type = db.Column(db.String(100), nullable=False, index=True)
    entity_id = db.Column(db.Integer, nullable=False, index=True)
    changes = db.Column(db.JSON, nullable=True)
    # Changed by: "super_admin:<id>", "member:<id>" or "system"
    changed_by = db.Column(db.String(100), nullable=True)

    def to_dict(self):
        """Convert model to dictionary."""
        data = super().to_dict()
        data.update({
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "changes": self.changes,
            "changed_by": self.changed_by,
        })
        return data


# Import models to ensure they're registered with SQLAlchemy
from leasehold.models.enums import (
    UNLIMITED,
    ResourceType,
    AddonType,
    AddonPurchaseStatus,
    PackageType,
    BillingCycle,
    MemberRole,
    NotificationStatus,
    FeatureStatus,
    UpgradeType,
)
from leasehold.models.package_tier import PackageTier, PackageTierVersion
from leasehold.models.organization import (
    Organization,
    OrganizationMember,
    OrganizationPackageSettings,
)
from leasehold.models.package_upgrade_notification import PackageUpgradeNotification
from leasehold.models.portfolio import Business, Property, Unit, TenantAccess
from leasehold.models.addon import AddonProduct, AddonPurchase
