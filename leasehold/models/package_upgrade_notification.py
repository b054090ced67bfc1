"""Package upgrade notification model."""

from datetime import datetime
from sqlalchemy import Enum as SQLEnum
from leasehold import db
from leasehold.models import BaseModel
from leasehold.models.enums import NotificationStatus


class PackageUpgradeNotification(BaseModel):
    """
    Package Upgrade Notification model.

    Created for every organization pinned to an older version when a tier
    is edited. Organizations opt in to the new terms; declining keeps the
    current settings.
    """

    __tablename__ = "package_upgrade_notifications"

    organization_id = db.Column(
        db.Integer,
        db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    package_tier_id = db.Column(
        db.Integer,
        db.ForeignKey("package_tiers.id", ondelete="CASCADE"),
        nullable=False
    )
    old_version = db.Column(db.Integer, nullable=False)
    new_version = db.Column(db.Integer, nullable=False)

    # {"field": [old, new], ...}
    changes_summary = db.Column(db.JSON, nullable=True)
    pricing_changed = db.Column(db.Boolean, nullable=False, default=False)
    limits_changed = db.Column(db.Boolean, nullable=False, default=False)
    features_changed = db.Column(db.Boolean, nullable=False, default=False)

    status = db.Column(
        SQLEnum(NotificationStatus),
        nullable=False,
        default=NotificationStatus.PENDING,
        index=True
    )
    notified_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    responded_at = db.Column(db.DateTime, nullable=True)
    responded_by = db.Column(db.String(100), nullable=True)
    expires_at = db.Column(db.DateTime, nullable=True)

    package_tier = db.relationship("PackageTier")

    def is_expired(self, now: datetime = None) -> bool:
        now = now or datetime.utcnow()
        return self.expires_at is not None and self.expires_at <= now

    def __repr__(self):
        """String representation."""
        return (
            f"<PackageUpgradeNotification org:{self.organization_id} "
            f"v{self.old_version}->v{self.new_version} {self.status.value}>"
        )
